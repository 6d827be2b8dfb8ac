from ..lexer import tokenize
from .grammar import GRAMMAR, SILENT
from .peg import ParseNode, PegParser

parser = PegParser(GRAMMAR, start="program", silent=SILENT)


def parse(source: str) -> ParseNode:
    """Parses source text into a parse tree rooted at the `program` rule."""
    return parser.parse(tokenize(source))

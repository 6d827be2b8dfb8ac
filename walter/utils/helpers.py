from ..ast2 import build_program
from ..ast2.nodes import Program
from ..parser import parse


def parse_code(code: str) -> Program:
    """Source text to AST. Errors carry spans into 'code'."""
    return build_program(parse(code))

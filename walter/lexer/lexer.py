from ply import lex

from ..errors import ParseError, Span

tokens = (
    'FUN', 'EXTERN', 'LET', 'RETURN',
    'IF', 'ELSE', 'WHILE',
    'TYPE_INT', 'TYPE_BYTE', 'TYPE_STR', 'TYPE_VOID',

    'PLUS', 'MINUS', 'MULT', 'DIV', 'MOD',
    'EQEQ', 'NOTEQ', 'LT', 'GT', 'LTEQ', 'GTEQ',
    'EQUAL', 'ARROW',
    'LPAREN', 'RPAREN', 'LBRACE', 'RBRACE',
    'COMMA', 'SEMICOLON', 'COLON',

    'INTEGER', 'STRING_LITERAL', 'BYTE_LITERAL',
    'IDENTIFIER',
)

t_ARROW = r'->'
t_EQEQ = r'=='
t_NOTEQ = r'!='
t_LTEQ = r'<='
t_GTEQ = r'>='
t_LT = r'<'
t_GT = r'>'
t_EQUAL = r'='
t_PLUS = r'\+'
t_MINUS = r'-'
t_MULT = r'\*'
t_DIV = r'/'
t_MOD = r'%'
t_LPAREN = r'\('
t_RPAREN = r'\)'
t_LBRACE = r'\{'
t_RBRACE = r'\}'
t_COMMA = r','
t_SEMICOLON = r';'
t_COLON = r':'


def t_BLOCK_COMMENT(t):
    r'/\*[\s\S]*?\*/'
    t.lexer.lineno += t.value.count('\n')


keywords = {
    'fun': 'FUN',
    'extern': 'EXTERN',
    'let': 'LET',
    'return': 'RETURN',

    'if': 'IF',
    'else': 'ELSE',
    'while': 'WHILE',

    'int': 'TYPE_INT',
    'byte': 'TYPE_BYTE',
    'str': 'TYPE_STR',
    'void': 'TYPE_VOID',
}


def t_IDENTIFIER(t):
    r'[a-zA-Z_][a-zA-Z0-9_]*'
    t.type = keywords.get(t.value, 'IDENTIFIER')
    return t


def t_INTEGER(t):
    r'\d+'
    return t


def t_STRING_LITERAL(t):
    r'\"([^\\\"\n]|\\.)*\"'
    return t


def t_BYTE_LITERAL(t):
    r'\'([^\\\'\n]|\\x[0-9a-fA-F]{2}|\\.)\''
    return t


t_ignore = ' \t\r'
t_ignore_LINECOMMENT = r'//.*'


def t_newline(t):
    r'\n+'
    t.lexer.lineno += len(t.value)


def t_error(t):
    pos = t.lexpos
    raise ParseError(
        f"Illegal character '{t.value[0]}'",
        Span(pos, pos + 1, t.lexer.lineno, find_column(t.lexer.lexdata, pos)),
    )


def find_column(input_text, lexpos):
    """Calculates the 1-based column number of a raw lexpos."""
    last_cr = input_text.rfind('\n', 0, lexpos)
    return lexpos - last_cr


class Token:
    """A lexed token: PLY type name, raw source text and its span."""

    __slots__ = ("type", "value", "span")

    def __init__(self, type, value, span):
        self.type = type
        self.value = value
        self.span = span

    def __repr__(self):
        return f"Token({self.type}, {self.value!r}, {self.span.line}:{self.span.column})"


def tokenize(source: str):
    """Lexes the whole source. The list always ends with an EOF token."""
    lx = lexer.clone()
    lx.lineno = 1
    lx.input(source)

    result = []
    for tok in iter(lx.token, None):
        span = Span(
            tok.lexpos,
            tok.lexpos + len(tok.value),
            tok.lineno,
            find_column(source, tok.lexpos),
        )
        result.append(Token(tok.type, tok.value, span))

    end = len(source)
    result.append(Token('EOF', '', Span(end, end, lx.lineno, find_column(source, end))))
    return result


lexer = lex.lex()

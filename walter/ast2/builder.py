import re

from ..errors import MalformedNodeError, NestingError
from ..lexer import Token
from ..parser.peg import ParseNode
from .nodes import *

TYPE_TOKENS = {
    'TYPE_INT': 'int',
    'TYPE_BYTE': 'byte',
    'TYPE_STR': 'str',
    'TYPE_VOID': 'void',
}

ESCAPES = {'n': b'\n', 't': b'\t', 'r': b'\r', '0': b'\0', '\\': b'\\', '"': b'"', "'": b"'"}
_ESCAPE_RE = re.compile(r'\\(x[0-9a-fA-F]{2}|.)')

I32_MAX = 2 ** 31 - 1


def _escape_byte(seq: str, span) -> bytes:
    if seq.startswith('x') and len(seq) == 3:
        return bytes([int(seq[1:], 16)])
    if seq in ESCAPES:
        return ESCAPES[seq]
    raise MalformedNodeError(f"Unknown escape sequence '\\{seq}'", span)


def unescape(text: str, span) -> bytes:
    """String literal body to the bytes it denotes: UTF-8 text, '\\xNN' is exactly one byte."""
    out = bytearray()
    pos = 0
    for m in _ESCAPE_RE.finditer(text):
        out += text[pos:m.start()].encode('utf-8')
        out += _escape_byte(m.group(1), span)
        pos = m.end()
    out += text[pos:].encode('utf-8')
    return bytes(out)


class ASTBuilder:
    """
    Maps a parse tree onto AST nodes, one constructor per rule tag.
    Children are built before their parent and the first failure aborts
    the whole build.
    """

    def build(self, node):
        if isinstance(node, Token):
            return self._token_expr(node)
        handler = getattr(self, f"build_{node.rule}", None)
        if handler is None:
            raise MalformedNodeError(f"No AST mapping for rule '{node.rule}'", node.span)
        return handler(node)

    # --- shape helpers ---
    @staticmethod
    def _nodes(node, rule=None):
        return [c for c in node.children if isinstance(c, ParseNode) and (rule is None or c.rule == rule)]

    @staticmethod
    def _tokens(node, type_=None):
        return [c for c in node.children if isinstance(c, Token) and (type_ is None or c.type == type_)]

    def _one(self, node, rule):
        found = self._nodes(node, rule)
        if len(found) != 1:
            raise MalformedNodeError(
                f"'{node.rule}' expects exactly one '{rule}', found {len(found)}", node.span
            )
        return found[0]

    def _name(self, node):
        idents = self._tokens(node, 'IDENTIFIER')
        if not idents:
            raise MalformedNodeError(f"'{node.rule}' is missing its identifier", node.span)
        return idents[0].value

    def _opt(self, node, rule):
        found = self._nodes(node, rule)
        if len(found) > 1:
            raise MalformedNodeError(f"'{node.rule}' has more than one '{rule}'", node.span)
        return self.build(found[0]) if found else None

    def _token_expr(self, tok):
        if tok.type == 'IDENTIFIER':
            return Identifier(tok.value).at(tok.span)
        raise MalformedNodeError(f"Unexpected token '{tok.value}' in expression", tok.span)

    # ==========================================================================
    #                              PROGRAM STRUCTURE
    # ==========================================================================
    def build_program(self, node):
        items = [self.build(c) for c in self._nodes(node)]
        return Program(items).at(node.span)

    def build_function(self, node):
        params = self._opt(node, "params") or []
        ret = self._opt(node, "ret_type") or "void"
        body = self.build(self._one(node, "block"))
        return FunctionDecl(self._name(node), params, ret, body).at(node.span)

    def build_extern(self, node):
        params = self._opt(node, "params") or []
        ret = self._opt(node, "ret_type") or "void"
        return ExternDecl(self._name(node), params, ret).at(node.span)

    def build_params(self, node):
        return [self.build(p) for p in self._nodes(node, "param")]

    def build_param(self, node):
        type_name = self.build(self._one(node, "type"))
        return Param(self._name(node), type_name).at(node.span)

    def build_ret_type(self, node):
        return self.build(self._one(node, "type"))

    def build_type(self, node):
        toks = self._tokens(node)
        if len(toks) != 1 or toks[0].type not in TYPE_TOKENS:
            raise MalformedNodeError("Malformed type annotation", node.span)
        return TYPE_TOKENS[toks[0].type]

    # ==========================================================================
    #                              STATEMENTS
    # ==========================================================================
    def build_block(self, node):
        return Block([self.build(c) for c in self._nodes(node)]).at(node.span)

    def build_var_decl(self, node):
        type_name = self._opt(node, "type")
        value = self.build(self._one(node, "comparison"))
        return VarDecl(self._name(node), type_name, value).at(node.span)

    def build_if_stmt(self, node):
        cond = self.build(self._one(node, "comparison"))
        blocks = self._nodes(node, "block")
        nested = self._nodes(node, "if_stmt")
        if not blocks or len(blocks) + len(nested) > 2:
            raise MalformedNodeError("Malformed if statement", node.span)
        then_body = self.build(blocks[0])
        else_body = None
        if nested:
            else_body = self.build(nested[0])
        elif len(blocks) == 2:
            else_body = self.build(blocks[1])
        return If(cond, then_body, else_body).at(node.span)

    def build_while_stmt(self, node):
        cond = self.build(self._one(node, "comparison"))
        body = self.build(self._one(node, "block"))
        return While(cond, body).at(node.span)

    def build_return_stmt(self, node):
        value = self._opt(node, "comparison")
        return Return(value).at(node.span)

    def build_assign(self, node):
        value = self.build(self._one(node, "comparison"))
        return Assign(self._name(node), value).at(node.span)

    def build_expr_stmt(self, node):
        return ExprStmt(self.build(self._one(node, "comparison"))).at(node.span)

    # ==========================================================================
    #                              EXPRESSIONS
    # ==========================================================================
    def _fold(self, node):
        """operand (op operand)* -> left-associative BinaryOp chain."""
        children = node.children
        if len(children) % 2 != 1:
            raise MalformedNodeError(f"Malformed operator chain in '{node.rule}'", node.span)
        result = self.build(children[0])
        for i in range(1, len(children), 2):
            op = children[i]
            if not isinstance(op, Token):
                raise MalformedNodeError(f"Expected an operator in '{node.rule}'", node.span)
            right = self.build(children[i + 1])
            result = BinaryOp(op.value, result, right).at(result.span.merge(right.span))
        return result

    build_comparison = _fold
    build_additive = _fold
    build_term = _fold

    def build_paren(self, node):
        return self.build(self._one(node, "comparison"))

    def build_call(self, node):
        args_nodes = self._nodes(node, "args")
        if len(args_nodes) > 1:
            raise MalformedNodeError("Malformed argument list", node.span)
        args = self.build(args_nodes[0]) if args_nodes else []
        return Call(self._name(node), args).at(node.span)

    def build_args(self, node):
        exprs = self._nodes(node, "comparison")
        commas = self._tokens(node, 'COMMA')
        if len(commas) != len(exprs) - 1:
            raise MalformedNodeError("Malformed argument list", node.span)
        return [self.build(e) for e in exprs]

    def build_literal(self, node):
        toks = self._tokens(node)
        if len(toks) != 1:
            raise MalformedNodeError("Malformed literal", node.span)
        tok = toks[0]

        if tok.type == 'INTEGER':
            value = int(tok.value)
            if value > I32_MAX:
                raise MalformedNodeError(f"Integer literal {value} does not fit in 'int'", tok.span)
            return Literal(value, "int").at(tok.span)

        if tok.type == 'STRING_LITERAL':
            return Literal(unescape(tok.value[1:-1], tok.span), "str").at(tok.span)

        if tok.type == 'BYTE_LITERAL':
            body = tok.value[1:-1]
            # 'é' names the Latin-1 byte 0xE9; anything past U+00FF has no single byte.
            code = _escape_byte(body[1:], tok.span)[0] if body.startswith('\\') else ord(body)
            if code > 0xFF:
                raise MalformedNodeError(f"Byte literal {tok.value} is not a single byte", tok.span)
            return Literal(code, "byte").at(tok.span)

        raise MalformedNodeError(f"Unknown literal token {tok.type}", tok.span)


def build_program(tree) -> Program:
    if not isinstance(tree, ParseNode) or tree.rule != "program":
        raise MalformedNodeError("Parse tree is not rooted at 'program'", getattr(tree, "span", None))
    try:
        return ASTBuilder().build(tree)
    except RecursionError:
        raise NestingError("Program is nested too deeply", tree.span) from None

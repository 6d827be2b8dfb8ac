from .nodes import *

INDENT = "    "

_UNESCAPES = {0x0A: '\\n', 0x09: '\\t', 0x0D: '\\r', 0x00: '\\0', 0x5C: '\\\\'}


def _quote(data: bytes, quote: str) -> str:
    """Printable ASCII stays as is; every other byte is written as an escape."""
    out = []
    for b in data:
        if b in _UNESCAPES:
            out.append(_UNESCAPES[b])
        elif chr(b) == quote:
            out.append('\\' + quote)
        elif 0x20 <= b < 0x7F:
            out.append(chr(b))
        else:
            out.append(f"\\x{b:02x}")
    return quote + "".join(out) + quote


def format_expr(expr) -> str:
    if isinstance(expr, Literal):
        if expr.kind == "str":
            return _quote(expr.value, '"')
        if expr.kind == "byte":
            return _quote(bytes([expr.value]), "'")
        return str(expr.value)
    if isinstance(expr, Identifier):
        return expr.name
    if isinstance(expr, Call):
        return f"{expr.callee}({', '.join(format_expr(a) for a in expr.args)})"
    if isinstance(expr, BinaryOp):
        return f"{_operand(expr.left)} {expr.op} {_operand(expr.right)}"
    raise TypeError(f"Cannot format expression {type(expr).__name__}")


def _operand(expr):
    # Nested operators are always parenthesised; parens build no node of their own.
    if isinstance(expr, BinaryOp):
        return f"({format_expr(expr)})"
    return format_expr(expr)


def _signature(decl):
    params = ", ".join(f"{p.name}: {p.type_name}" for p in decl.params)
    ret = "" if decl.return_type == "void" else f" -> {decl.return_type}"
    return f"fun {decl.name}({params}){ret}"


def _block(block, depth):
    lines = ["{"]
    for stmt in block.statements:
        lines.extend(_stmt(stmt, depth + 1))
    lines.append(INDENT * depth + "}")
    return lines


def _join(head, block_lines):
    """Glues a header onto the opening brace of a rendered block."""
    return [head + " " + block_lines[0]] + block_lines[1:]


def _stmt(stmt, depth):
    pad = INDENT * depth
    if isinstance(stmt, Block):
        lines = _block(stmt, depth)
        return [pad + lines[0]] + lines[1:]
    if isinstance(stmt, VarDecl):
        annot = f": {stmt.type_name}" if stmt.type_name else ""
        return [f"{pad}let {stmt.name}{annot} = {format_expr(stmt.value)};"]
    if isinstance(stmt, Assign):
        return [f"{pad}{stmt.name} = {format_expr(stmt.value)};"]
    if isinstance(stmt, ExprStmt):
        return [f"{pad}{format_expr(stmt.expression)};"]
    if isinstance(stmt, Return):
        if stmt.value is None:
            return [f"{pad}return;"]
        return [f"{pad}return {format_expr(stmt.value)};"]
    if isinstance(stmt, While):
        return _join(f"{pad}while {format_expr(stmt.condition)}", _block(stmt.body, depth))
    if isinstance(stmt, If):
        return _if(stmt, depth, pad + "if")
    raise TypeError(f"Cannot format statement {type(stmt).__name__}")


def _if(stmt, depth, head):
    lines = _join(f"{head} {format_expr(stmt.condition)}", _block(stmt.then_body, depth))
    if isinstance(stmt.else_body, If):
        nested = _if(stmt.else_body, depth, "} else if")
        lines = lines[:-1] + [INDENT * depth + nested[0]] + nested[1:]
    elif isinstance(stmt.else_body, Block):
        tail = _block(stmt.else_body, depth)
        lines = lines[:-1] + [INDENT * depth + "} else " + tail[0]] + tail[1:]
    return lines


def format_program(program: Program) -> str:
    lines = []
    for item in program.items:
        if isinstance(item, FunctionDecl):
            lines.extend(_join(_signature(item), _block(item.body, 0)))
        elif isinstance(item, ExternDecl):
            lines.append(f"extern {_signature(item)};")
        else:
            lines.extend(_stmt(item, 0))
        lines.append("")
    return "\n".join(lines)

from .essentials import *

ARITHMETIC_OPS = {
    "+": ("add", "addtmp"),
    "-": ("sub", "subtmp"),
    "*": ("mul", "multmp"),
    "/": ("sdiv", "divtmp"),
    "%": ("srem", "remtmp"),
}


def _as_integer(ctx: CodegenContext, value: ir.Value, span) -> ir.Value:
    if isinstance(value.type, ir.IntType):
        if value.type.width == 1:
            return ctx.builder.zext(value, ir.IntType(32), name="bool_ext")
        return value
    raise TypeMismatchError(f"Operator expects integer operands, got '{value_type_name(value, span)}'", span)


# ---------------------------------------------------------------------------
# <Method name=compile_binary_op args=[<CodegenContext>, <BinaryOp>]>
# <Description>
# Compiles arithmetic (+ - * / %) and comparison (== != < > <= >=).
# Operator chains are left-folded, so the left spine is walked in a loop
# instead of recursing once per operator.
# 1. Collects the chain down the left spine and lowers its leftmost operand.
# 2. Applies each operator bottom-up, lowering its right operand in turn.
# </Description>
def compile_binary_op(ctx: CodegenContext, ast: BinaryOp) -> ir.Value:
    # 1. Left spine
    chain = []
    node = ast
    while isinstance(node, BinaryOp):
        chain.append(node)
        node = node.left
    lhs = ctx.compile(node)
    lhs_span = node.span

    # 2. Fold
    for op_node in reversed(chain):
        lhs = _emit_binary(ctx, op_node, lhs, lhs_span)
        lhs_span = op_node.span
    return lhs


# <Method name=_emit_binary args=[<CodegenContext>, <BinaryOp>, <ir.Value>]>
# <Description>
# One operator of a chain, with its left operand already lowered.
# 1. Widens comparison results (i1) to int.
# 2. Requires both sides to have the same integer width; no other widening.
# 3. Arithmetic yields the operand type, comparisons yield i1.
# </Description>
def _emit_binary(ctx: CodegenContext, ast: BinaryOp, lhs: ir.Value, lhs_span) -> ir.Value:
    # 1. Operands
    lhs = _as_integer(ctx, lhs, lhs_span)
    rhs = _as_integer(ctx, ctx.compile(ast.right), ast.right.span)

    # 2. Widths
    if lhs.type != rhs.type:
        raise TypeMismatchError(
            f"Operands of '{ast.op}' differ in type: '{value_type_name(lhs)}' and '{value_type_name(rhs)}'",
            ast.span,
        )

    # 3. Emit
    if ast.op in ARITHMETIC_OPS:
        method, name = ARITHMETIC_OPS[ast.op]
        return getattr(ctx.builder, method)(lhs, rhs, name=name)

    if ast.op in BinaryOp.COMPARISON:
        return ctx.builder.icmp_signed(ast.op, lhs, rhs, name="cmptmp")

    raise MalformedNodeError(f"Unknown operator '{ast.op}'", ast.span)

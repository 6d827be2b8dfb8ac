from .essentials import *


# ---------------------------------------------------------------------------
# <Method name=compile_literal args=[<CodegenContext>, <Literal>]>
# <Description>
# Compiles a Literal AST node into an LLVM Constant.
# Handles:
# 1. Strings (Interned Global i8*)
# 2. Bytes (i8)
# 3. Integers (i32)
# </Description>
def compile_literal(ctx: CodegenContext, ast: Literal) -> ir.Value:
    if ast.kind == "str":
        return create_global_string(ctx, ast.value)

    if ast.kind == "byte":
        return ir.Constant(ir.IntType(8), ast.value)

    if ast.kind == "int":
        return ir.Constant(ir.IntType(32), ast.value)

    raise MalformedNodeError(f"Unsupported literal kind '{ast.kind}'", ast.span)

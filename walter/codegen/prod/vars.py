from .essentials import *


# ---------------------------------------------------------------------------
# <Method name=compile_variable_declaration args=[<CodegenContext>, <VarDecl>]>
# <Description>
# Compiles 'let name[: type] = value;' into an entry-block alloca plus a store.
# Without an annotation the slot takes the initializer's type.
# </Description>
def compile_variable_declaration(ctx: CodegenContext, ast: VarDecl):
    # 1. Compile Initializer
    value = ctx.compile(ast.value)

    # 2. Resolve Type
    type_name = ast.type_name or value_type_name(value, ast.value.span)

    # 3. Create Variable (alloca + store + scope registration)
    log.debug("let %s: %s (scope depth %d)", ast.name, type_name, ctx.current_scope.depth)
    return create_variable(ctx, ast.name, type_name, value, ast.span)


# ---------------------------------------------------------------------------
# <Method name=compile_assignment args=[<CodegenContext>, <Assign>]>
# <Description>
# Compiles 'name = value;'. The target must already be declared in an
# enclosing scope; the value is coerced to the declared type.
# </Description>
def compile_assignment(ctx: CodegenContext, ast: Assign):
    info = ctx.current_scope.resolve_info(ast.name)
    if info is None:
        raise UndefinedSymbolError(f"Cannot assign to unknown variable '{ast.name}'", ast.span)

    value = ctx.compile(ast.value)
    ctx.builder.store(coerce(ctx, value, info.type_name, ast.value.span), info.llvm_value)


def compile_identifier(ctx: CodegenContext, ast: Identifier) -> ir.Value:
    info = ctx.current_scope.resolve_info(ast.name)
    if info is None:
        raise UndefinedSymbolError(f"Use of undeclared identifier '{ast.name}'", ast.span)
    return ctx.builder.load(info.llvm_value, name=ast.name + "_val")

from .essentials import *
from ...semantics.types import llvm_type
from .flow import compile_statements


def _signature_types(params, return_type, span):
    param_types = []
    for p in params:
        if p.type_name == "void":
            raise TypeMismatchError(f"Parameter '{p.name}' cannot have type 'void'", p.span)
        param_types.append(p.type_name)
    fnty = ir.FunctionType(
        llvm_type(return_type, span),
        [llvm_type(t, span) for t in param_types],
    )
    return fnty, param_types


def _register(ctx: CodegenContext, sig: FunctionSig):
    ctx.functions[sig.name] = sig
    log.debug("declared %r", sig)
    return sig


# ---------------------------------------------------------------------------
# <Method name=declare_function args=[<CodegenContext>, <FunctionDecl>]>
# <Description>
# Forward declaration of a user function (prototype only).
# Runs before any body is lowered so calls resolve in any order.
# 1. Rejects duplicate names.
# 2. Checks the entry point signature: fun main() -> int.
# 3. Creates the LLVM function and registers its signature.
# </Description>
def declare_function(ctx: CodegenContext, ast: FunctionDecl) -> FunctionSig:
    # 1. Duplicates
    if ast.name in ctx.functions or ast.name in ctx.module.globals:
        raise DuplicateSymbolError(f"Function '{ast.name}' is already defined.", ast.span)

    # 2. Entry point
    if ast.name == ENTRY_POINT and (ast.params or ast.return_type != "int"):
        raise EntryPointError(
            f"Entry point '{ENTRY_POINT}' must be declared as 'fun {ENTRY_POINT}() -> int'", ast.span
        )

    # 3. Create
    fnty, param_types = _signature_types(ast.params, ast.return_type, ast.span)
    fn = ir.Function(ctx.module, fnty, name=ast.name)
    if ast.name == ENTRY_POINT:
        ctx.entry_point = fn
    return _register(ctx, FunctionSig(ast.name, fn, param_types, ast.return_type, span=ast.span))


# ---------------------------------------------------------------------------
# <Method name=compile_extern args=[<CodegenContext>, <ExternDecl>]>
# <Description>
# Compiles 'extern fun name(...) -> T;'. Registers an externally linked routine.
# Redeclaring a known routine is fine as long as the signature is identical.
# The entry point is always defined by the program itself, never external.
# </Description>
def compile_extern(ctx: CodegenContext, ast: ExternDecl) -> FunctionSig:
    if ast.name == ENTRY_POINT:
        raise EntryPointError(f"Entry point '{ENTRY_POINT}' cannot be declared 'extern'", ast.span)

    fnty, param_types = _signature_types(ast.params, ast.return_type, ast.span)

    existing = ctx.functions.get(ast.name)
    if existing is not None:
        if not existing.external or existing.llvm_function.function_type != fnty:
            raise DuplicateSymbolError(
                f"Redefinition of '{ast.name}' with different signature.\n"
                f"Existing: {existing.llvm_function.function_type}\nNew: {fnty}",
                ast.span,
            )
        return existing

    fn = ctx.module.globals.get(ast.name)
    if fn is None:
        fn = ir.Function(ctx.module, fnty, name=ast.name)
    elif not isinstance(fn, ir.Function) or fn.function_type != fnty:
        raise DuplicateSymbolError(f"Symbol '{ast.name}' is already declared with another type.", ast.span)

    return _register(ctx, FunctionSig(ast.name, fn, param_types, ast.return_type, external=True, span=ast.span))


# ---------------------------------------------------------------------------
# <Method name=compile_function_declaration args=[<CodegenContext>, <FunctionDecl>]>
# <Description>
# Lowers a function body into its (already declared) LLVM function.
# 1. Creates the single entry block and moves the cursor there.
# 2. Pushes the function scope and spills arguments into stack slots.
# 3. Lowers the body.
# 4. Closes the function (implicit returns / missing return check).
# </Description>
def compile_function_declaration(ctx: CodegenContext, ast: FunctionDecl) -> ir.Function:
    sig = ctx.functions[ast.name]
    fn = sig.llvm_function
    log.debug("lowering function '%s'", ast.name)

    prev = (ctx.function, ctx.builder, ctx.return_type)

    # 1. Entry Block
    ctx.function = fn
    ctx.return_type = sig.return_type
    ctx.builder = ir.IRBuilder(fn.append_basic_block(name="entry"))

    # 2. Scope + Arguments
    enter_scope(ctx)
    for llvm_arg, param in zip(fn.args, ast.params):
        llvm_arg.name = param.name
        create_variable(ctx, param.name, param.type_name, llvm_arg, param.span)

    # 3. Body (shares the parameter scope)
    compile_statements(ctx, ast.body.statements)

    # 4. Exit
    finish_function(ctx, ast.name, ast.span)
    exit_scope(ctx)

    ctx.function, ctx.builder, ctx.return_type = prev
    return fn


# ---------------------------------------------------------------------------
# <Method name=compile_entry_point args=[<CodegenContext>, <list>]>
# <Description>
# Builds the implicit 'main' from top-level statements.
# </Description>
def compile_entry_point(ctx: CodegenContext, statements, span=None) -> ir.Function:
    fn = ir.Function(ctx.module, ir.FunctionType(ir.IntType(32), []), name=ENTRY_POINT)
    ctx.entry_point = fn
    _register(ctx, FunctionSig(ENTRY_POINT, fn, [], "int", span=span))
    return compile_function_declaration(ctx, FunctionDecl(ENTRY_POINT, [], "int", Block(statements)).at(span))


def finish_function(ctx: CodegenContext, name: str, span=None):
    if ctx.builder.block.is_terminated:
        return

    ret_ty = ctx.function.function_type.return_type
    if isinstance(ret_ty, ir.VoidType):
        ctx.builder.ret_void()
    elif ctx.in_entry_point:
        ctx.builder.ret(ir.Constant(ret_ty, 0))
    else:
        raise MissingReturnError(
            f"Function '{name}' is missing a return statement.",
            span,
        )


# ---------------------------------------------------------------------------
# <Method name=compile_return args=[<CodegenContext>, <Return>]>
# <Description>
# Compiles 'return expr;' or 'return;'.
# 1. Void returns.
# 2. Value returns, coerced to the declared return type.
# </Description>
def compile_return(ctx: CodegenContext, ast: Return):
    # 1. Void Return
    if ast.value is None:
        if ctx.return_type != "void":
            raise TypeMismatchError("Function expects a return value, but got 'return;'.", ast.span)
        ctx.builder.ret_void()
        return

    if ctx.return_type == "void":
        raise TypeMismatchError("Cannot return a value from a 'void' function.", ast.value.span)

    # 2. Value Return
    ret_val = ctx.compile(ast.value)
    ctx.builder.ret(coerce(ctx, ret_val, ctx.return_type, ast.value.span))


# ---------------------------------------------------------------------------
# <Method name=compile_function_call args=[<CodegenContext>, <Call>]>
# <Description>
# Compiles 'name(args...)'.
# 1. Resolves the callee among declared functions, externs and stdlib routines.
# 2. Checks arity.
# 3. Lowers and coerces arguments left to right.
# 4. Emits the call.
# </Description>
def compile_function_call(ctx: CodegenContext, ast: Call) -> ir.Value:
    # 1. Resolve
    sig = ctx.functions.get(ast.callee)
    if sig is None:
        raise UndefinedFunctionError(f"Call to undefined function '{ast.callee}'", ast.span)

    # 2. Arity
    if len(ast.args) != len(sig.param_types):
        raise ArityError(
            f"Function '{ast.callee}' expects {len(sig.param_types)} argument(s), got {len(ast.args)}",
            ast.span,
        )

    # 3. Arguments
    args = []
    for arg_ast, type_name in zip(ast.args, sig.param_types):
        args.append(coerce(ctx, ctx.compile(arg_ast), type_name, arg_ast.span))

    # 4. Call
    name = "" if sig.return_type == "void" else f"{ast.callee}_call"
    return ctx.builder.call(sig.llvm_function, args, name=name)

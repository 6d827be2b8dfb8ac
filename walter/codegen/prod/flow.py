from .essentials import *


# ---------------------------------------------------------------------------
# <Method name=compile_statements args=[<CodegenContext>, <list>]>
# <Description>
# Lowers statements in order at the current cursor. Anything after a
# terminator in the same block can never run and is skipped.
# </Description>
def compile_statements(ctx: CodegenContext, statements):
    for i, stmt in enumerate(statements):
        if ctx.builder.block.is_terminated:
            log.debug("Skipping %d unreachable statement(s) in '%s'",
                      len(statements) - i, ctx.function.name)
            return
        ctx.compile(stmt)


def compile_block(ctx: CodegenContext, ast: Block):
    enter_scope(ctx)
    compile_statements(ctx, ast.statements)
    exit_scope(ctx)


# ---------------------------------------------------------------------------
# <Method name=compile_if args=[<CodegenContext>, <If>]>
# <Description>
# Compiles 'if cond { ... } [else { ... } | else if ...]'.
# 1. Lowers the condition in the current block.
# 2. Creates then / else blocks and a conditional branch.
# 3. Lowers each branch with the cursor moved into it.
# 4. Every branch end that is not terminated jumps to a merge block; when
#    all branches terminate there is no merge block at all.
# </Description>
def compile_if(ctx: CodegenContext, ast: If):
    func = ctx.function
    suffix = ctx.next_suffix()

    # 1. Condition
    cond_val = as_condition(ctx, ctx.compile(ast.condition), ast.condition.span)

    # 2. Blocks
    then_bb = func.append_basic_block(f"if_then{suffix}")
    merge_bb = None
    if ast.else_body is None:
        merge_bb = func.append_basic_block(f"if_merge{suffix}")
        else_bb = merge_bb
    else:
        else_bb = func.append_basic_block(f"if_else{suffix}")
    ctx.builder.cbranch(cond_val, then_bb, else_bb)

    # 3. Branch bodies
    open_ends = []

    ctx.builder.position_at_end(then_bb)
    compile_block(ctx, ast.then_body)
    if not ctx.builder.block.is_terminated:
        open_ends.append(ctx.builder.block)

    if ast.else_body is not None:
        ctx.builder.position_at_end(else_bb)
        if isinstance(ast.else_body, If):
            compile_if(ctx, ast.else_body)
        else:
            compile_block(ctx, ast.else_body)
        if not ctx.builder.block.is_terminated:
            open_ends.append(ctx.builder.block)

    # 4. Merge
    if merge_bb is None:
        if not open_ends:
            # Both arms returned: leave the cursor on a terminated block so the
            # caller stops lowering this statement list.
            return
        merge_bb = func.append_basic_block(f"if_merge{suffix}")

    for block in open_ends:
        ctx.builder.position_at_end(block)
        ctx.builder.branch(merge_bb)

    ctx.builder.position_at_end(merge_bb)


# ---------------------------------------------------------------------------
# <Method name=compile_while args=[<CodegenContext>, <While>]>
# <Description>
# Compiles 'while cond { ... }' as header / body / exit blocks.
# The header re-checks the condition, the body jumps back to the header,
# and lowering resumes in the exit block.
# </Description>
def compile_while(ctx: CodegenContext, ast: While):
    suffix = ctx.next_suffix()
    cond_block = ctx.function.append_basic_block(f"while_cond{suffix}")
    body_block = ctx.function.append_basic_block(f"while_body{suffix}")
    end_block = ctx.function.append_basic_block(f"while_end{suffix}")

    ctx.builder.branch(cond_block)

    ctx.builder.position_at_end(cond_block)
    cond_val = as_condition(ctx, ctx.compile(ast.condition), ast.condition.span)
    ctx.builder.cbranch(cond_val, body_block, end_block)

    ctx.builder.position_at_end(body_block)
    compile_block(ctx, ast.body)
    if not ctx.builder.block.is_terminated:
        ctx.builder.branch(cond_block)

    ctx.builder.position_at_end(end_block)

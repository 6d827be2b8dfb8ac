# =============================================================================
# Walter Compiler
#
# -----------------------------------------------------------------------------
# Copyright (C) 2025 M1778
#
# This file is part of the Walter Compiler.
#
# Walter is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# Walter is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with Walter.  If not, see <https://www.gnu.org/licenses/>.
#
# =============================================================================
from llvmlite import ir

from ..errors import TypeMismatchError
from ..semantics.scope import Scope
from ..semantics.types import from_llvm, llvm_type
from .context import CodegenContext


# -------------------------------------------------------------------------
# Scope Management
# -------------------------------------------------------------------------
def enter_scope(ctx: CodegenContext) -> Scope:
    """Pushes a new scope onto the chain."""
    ctx.current_scope = Scope(parent=ctx.current_scope)
    return ctx.current_scope


def exit_scope(ctx: CodegenContext):
    """Pops the current scope. The global scope is never popped."""
    if ctx.current_scope.parent is None:
        raise RuntimeError("Attempted to exit the global scope.")
    ctx.current_scope = ctx.current_scope.parent


# ---------------------------------------------------------------------------
# <Method name=create_global_string args=[<CodegenContext>, <bytes>]>
# <Description>
# Interns a string literal as a global constant in the LLVM module.
# 1. Checks the cache to avoid duplicating identical strings.
# 2. Creates a private global array constant [N x i8] with the bytes + null terminator.
# 3. Returns a pointer (i8*) to the start of the array using a Constant GEP.
# </Description>
def create_global_string(ctx: CodegenContext, val: bytes) -> ir.Value:
    # 1. Check Cache
    if val in ctx.global_strings:
        return ctx.global_strings[val]

    # 2. NUL terminate
    bytes_ = bytearray(val) + b"\00"
    str_ty = ir.ArrayType(ir.IntType(8), len(bytes_))

    # 3. Create Global Variable
    name = f".str.{len(ctx.global_strings)}"
    gvar = ir.GlobalVariable(ctx.module, str_ty, name=name)
    gvar.linkage = "private"
    gvar.global_constant = True
    gvar.initializer = ir.Constant(str_ty, bytes_)

    # 4. Create Pointer (i8*)
    # A constant GEP needs no active builder.
    zero = ir.Constant(ir.IntType(32), 0)
    str_ptr = gvar.gep([zero, zero])

    ctx.global_strings[val] = str_ptr
    return str_ptr


# ---------------------------------------------------------------------------
# <Method name=create_variable args=[<CodegenContext>, <str>, <str>, <ir.Value>]>
# <Description>
# Allocates a stack slot in the entry block, stores the initial value and
# binds the slot in the current scope.
# </Description>
def create_variable(ctx: CodegenContext, name: str, type_name: str,
                    initial_value: ir.Value, span=None) -> ir.AllocaInstr:
    llvm_ty = llvm_type(type_name, span)
    if isinstance(llvm_ty, ir.VoidType):
        raise TypeMismatchError(f"Variable '{name}' cannot have type 'void'", span)

    # Entry-block allocas keep loops from growing the stack.
    with ctx.builder.goto_entry_block():
        slot = ctx.builder.alloca(llvm_ty, name=name)

    ctx.current_scope.define(name, slot, type_name, span)
    ctx.builder.store(coerce(ctx, initial_value, type_name, span), slot)
    return slot


# ---------------------------------------------------------------------------
# <Method name=coerce args=[<CodegenContext>, <ir.Value>, <str>]>
# <Description>
# Makes a value fit a declared type. The only implicit conversion is
# i1 (a comparison result) -> any integer type. Everything else must match.
# </Description>
def coerce(ctx: CodegenContext, value: ir.Value, type_name: str, span=None) -> ir.Value:
    target = llvm_type(type_name, span)
    if isinstance(value.type, ir.VoidType):
        raise TypeMismatchError(f"Expected a value of type '{type_name}', but the expression has no value", span)

    if value.type == target and from_llvm(value.type) == type_name:
        return value

    if isinstance(value.type, ir.IntType) and value.type.width == 1 and isinstance(target, ir.IntType):
        return ctx.builder.zext(value, target, name="bool_ext")

    raise TypeMismatchError(
        f"Type mismatch: expected '{type_name}', got '{from_llvm(value.type)}'", span
    )


def value_type_name(value: ir.Value, span=None) -> str:
    """Source type a value would be stored as (comparison results become 'int')."""
    if isinstance(value.type, ir.VoidType):
        raise TypeMismatchError("Expression has no value", span)
    name = from_llvm(value.type)
    return "int" if name == "bool" else name


# ---------------------------------------------------------------------------
# <Method name=as_condition args=[<CodegenContext>, <ir.Value>]>
# <Description>
# Turns a lowered expression into an i1 branch condition.
# i1 is used as is; other integers are compared against zero.
# </Description>
def as_condition(ctx: CodegenContext, value: ir.Value, span=None) -> ir.Value:
    if isinstance(value.type, ir.IntType):
        if value.type.width == 1:
            return value
        zero = ir.Constant(value.type, 0)
        return ctx.builder.icmp_signed("!=", value, zero, name="cond")
    raise TypeMismatchError(
        f"Condition must be an integer, got '{from_llvm(value.type)}'", span
    )

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
import logging

from llvmlite import ir

from ..ast2.nodes import *
from ..errors import EntryPointError, MalformedNodeError, NestingError
from .context import CodegenContext, ENTRY_POINT
from .stdlib import declare_stdlib
from .verify import verify_module
from .prod.vars import compile_variable_declaration, compile_assignment, compile_identifier
from .prod.literals import compile_literal
from .prod.ops import compile_binary_op
from .prod.flow import compile_block, compile_if, compile_while, compile_statements
from .prod.funcs import (compile_entry_point, compile_extern, compile_function_call,
                         compile_function_declaration, compile_return, declare_function)

log = logging.getLogger("walter.codegen")


class WalterCompiler(CodegenContext):
    """Lowers a Program into one LLVM module."""

    def compile(self, ast: Node):
        if ast is None:
            return
        # Variables
        if isinstance(ast, VarDecl):
            return compile_variable_declaration(self, ast)
        elif isinstance(ast, Assign):
            return compile_assignment(self, ast)
        elif isinstance(ast, Identifier):
            return compile_identifier(self, ast)
        # Literal
        elif isinstance(ast, Literal):
            return compile_literal(self, ast)
        # Operators
        elif isinstance(ast, BinaryOp):
            return compile_binary_op(self, ast)
        # Functions
        elif isinstance(ast, Call):
            return compile_function_call(self, ast)
        elif isinstance(ast, Return):
            return compile_return(self, ast)
        elif isinstance(ast, FunctionDecl):
            return compile_function_declaration(self, ast)
        elif isinstance(ast, ExternDecl):
            return compile_extern(self, ast)
        # Control flow
        elif isinstance(ast, If):
            return compile_if(self, ast)
        elif isinstance(ast, While):
            return compile_while(self, ast)
        elif isinstance(ast, Block):
            return compile_block(self, ast)
        elif isinstance(ast, ExprStmt):
            self.compile(ast.expression)
            return None
        elif isinstance(ast, list):
            compile_statements(self, ast)
            return None
        # Programic
        elif isinstance(ast, Program):
            return self.compile_program(ast)
        else:
            raise MalformedNodeError(f"Cannot lower node '{type(ast).__name__}'", getattr(ast, "span", None))

    # ---------------------------------------------------------------------------
    # <Method name=compile_program args=[<Program>]>
    # <Description>
    # 1. Scouting: externs and function prototypes, so calls resolve in any order.
    # 2. Entry point rules: top-level statements or an explicit main, not both.
    # 3. Function bodies.
    # 4. Implicit main from the top-level statements (or an empty one).
    # </Description>
    def compile_program(self, ast: Program) -> ir.Module:
        functions = [i for i in ast.items if isinstance(i, FunctionDecl)]
        statements = [i for i in ast.items if not isinstance(i, (FunctionDecl, ExternDecl))]

        # 1. Scouting
        for item in ast.items:
            if isinstance(item, ExternDecl):
                compile_extern(self, item)
            elif isinstance(item, FunctionDecl):
                declare_function(self, item)

        # 2. Entry point
        explicit_main = next((f for f in functions if f.name == ENTRY_POINT), None)
        if explicit_main is not None and statements:
            raise EntryPointError(
                f"Top-level statements cannot be combined with an explicit '{ENTRY_POINT}' function",
                statements[0].span,
            )

        # 3. Bodies
        for fn in functions:
            compile_function_declaration(self, fn)

        # 4. Implicit main
        if explicit_main is None:
            span = ast.span
            if statements and statements[0].span is not None:
                span = statements[0].span.merge(statements[-1].span)
            compile_entry_point(self, statements, span)

        return self.module


def generate_module(program: Program, target=None, module_name: str = "main") -> ir.Module:
    """
    Builds and verifies the module for 'program'. 'target' is a TargetConfig
    whose triple is stamped on the module; None leaves the module untargeted.
    """
    compiler = WalterCompiler(module_name=module_name, triple=target.triple if target else None)
    declare_stdlib(compiler)
    try:
        compiler.compile(program)
    except RecursionError:
        raise NestingError("Program is nested too deeply", program.span) from None
    log.debug("lowered %d function(s)", len(compiler.functions))
    verify_module(compiler.module)
    return compiler.module

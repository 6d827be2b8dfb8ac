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
""" Walter Compiler - code generation state """
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from llvmlite import ir

from ..semantics.scope import Scope

ENTRY_POINT = "main"


class FunctionSig:
    """A callable known to the module: user function, extern or stdlib routine."""

    def __init__(self, name: str, llvm_function: ir.Function, param_types: List[str],
                 return_type: str, external: bool = False, span=None):
        self.name = name
        self.llvm_function = llvm_function
        self.param_types = param_types
        self.return_type = return_type
        self.external = external
        self.span = span

    def __repr__(self):
        return f"FunctionSig({self.name}({', '.join(self.param_types)}) -> {self.return_type})"


class CodegenContext(ABC):
    """
    Everything one lowering pass mutates. Created once per compilation and
    handed to every compile_* function explicitly.
    """

    def __init__(self, module_name: str = "main", triple: Optional[str] = None):
        # ------------------ Declare module ---------------------
        self.module = ir.Module(name=module_name)
        if triple:
            self.module.triple = triple

        # The builder is re-created per function: it is the block cursor.
        self.builder: Optional[ir.IRBuilder] = None
        self.function: Optional[ir.Function] = None
        self.return_type: Optional[str] = None

        # ---------------- Scopes ------------------
        self.global_scope = Scope(parent=None)
        self.current_scope = self.global_scope

        # ---------------- Registries ------------------
        self.functions: Dict[str, FunctionSig] = {}
        self.global_strings: Dict[bytes, ir.Value] = {}
        self.entry_point: Optional[ir.Function] = None
        self.block_count = 0

    @abstractmethod
    def compile(self, node):
        """Lowers one AST node at the current cursor (see WalterCompiler)."""

    @property
    def in_entry_point(self) -> bool:
        return self.function is not None and self.function is self.entry_point

    def next_suffix(self) -> str:
        """Unique suffix for block labels of one control-flow construct."""
        suffix = f".{self.block_count}"
        self.block_count += 1
        return suffix

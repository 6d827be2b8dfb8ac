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
""" Walter compile-time error hierarchy. """
from typing import Iterable, Optional


class Span:
    """Half-open character range [start, end) with 1-based line/column of start."""

    __slots__ = ("start", "end", "line", "column")

    def __init__(self, start: int, end: int, line: int = 1, column: int = 1):
        self.start = start
        self.end = end
        self.line = line
        self.column = column

    def merge(self, other: "Span") -> "Span":
        if other is None:
            return self
        first = self if self.start <= other.start else other
        return Span(first.start, max(self.end, other.end), first.line, first.column)

    def __eq__(self, other):
        return (
            isinstance(other, Span)
            and self.start == other.start
            and self.end == other.end
        )

    def __hash__(self):
        return hash((self.start, self.end))

    def __repr__(self):
        return f"Span({self.start}..{self.end} @ {self.line}:{self.column})"


class CompileError(Exception):
    """Base of every error that ends a compilation."""

    def __init__(self, message: str, span: Optional[Span] = None, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.span = span
        self.hint = hint


# -----------------------------------------------------------------------------
# Syntax
# -----------------------------------------------------------------------------
class ParseError(CompileError):
    """Grammar mismatch at the furthest position the matcher reached."""

    def __init__(
        self,
        message: str,
        span: Optional[Span] = None,
        expected: Iterable[str] = (),
        rules: Iterable[str] = (),
    ):
        self.expected = sorted(set(expected))
        self.rules = sorted(set(rules))
        hint = None
        if self.expected:
            hint = "expected one of: " + ", ".join(self.expected)
        super().__init__(message, span, hint)


# -----------------------------------------------------------------------------
# Semantics
# -----------------------------------------------------------------------------
class SemanticError(CompileError):
    pass


class UndefinedSymbolError(SemanticError):
    pass


class UndefinedFunctionError(SemanticError):
    pass


class MissingReturnError(SemanticError):
    pass


class MalformedNodeError(SemanticError):
    pass


class DuplicateSymbolError(SemanticError):
    pass


class TypeMismatchError(SemanticError):
    pass


class ArityError(SemanticError):
    pass


class EntryPointError(SemanticError):
    pass


class NestingError(SemanticError):
    """Nesting exceeds what the recursive passes can walk."""


# -----------------------------------------------------------------------------
# Post-lowering / outside the core
# -----------------------------------------------------------------------------
class ModuleVerificationError(CompileError):
    pass


class ExternalToolError(CompileError):
    """A git, cargo, linker or LLVM emission step failed."""

    def __init__(self, message: str, tool: str = "", output: str = ""):
        self.tool = tool
        self.output = output
        hint = output.strip().splitlines()[-1] if output and output.strip() else None
        super().__init__(message, None, hint)


class ConfigError(CompileError):
    pass

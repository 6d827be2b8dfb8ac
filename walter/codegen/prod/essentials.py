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

from ...ast2.nodes import *
from ...errors import *
from ..context import CodegenContext, FunctionSig, ENTRY_POINT
from ..helpers import as_condition, coerce, create_global_string, create_variable, enter_scope, exit_scope, value_type_name

log = logging.getLogger("walter.codegen")

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
# Program Basics:
class Node:
    span = None

    def at(self, span):
        """
        Attaches the originating source span.
        Usage in the builder: return Literal(...).at(node.span)
        """
        self.span = span
        return self

    def fields(self):
        return {k: v for k, v in vars(self).items() if k != "span"}

    # Structural equality: spans never take part.
    def __eq__(self, other):
        return type(self) is type(other) and self.fields() == other.fields()

    __hash__ = None


class Program(Node):
    def __init__(self, items):
        self.items = items

    def __repr__(self):
        t = ""
        for i in self.items:
            t += str(i) + "\n\n"
        return f"Program({t})"


# Functions
class Param(Node):
    def __init__(self, name, type_name):
        self.name = name
        self.type_name = type_name

    def __repr__(self):
        return f"{self.name}: {self.type_name}"


class FunctionDecl(Node):
    def __init__(self, name, params, return_type, body):
        self.name = name
        self.params = params
        self.return_type = return_type
        self.body = body

    def __repr__(self):
        return f"FunctionDecl(Name={self.name}, Params={self.params}, Returns={self.return_type}, Body={self.body})"


class ExternDecl(Node):
    def __init__(self, name, params, return_type):
        self.name = name
        self.params = params
        self.return_type = return_type

    def __repr__(self):
        return f"ExternDecl(Name={self.name}, Params={self.params}, Returns={self.return_type})"


# Statements
class Block(Node):
    def __init__(self, statements):
        self.statements = statements

    def __repr__(self):
        return f"Block({self.statements})"


class ExprStmt(Node):
    def __init__(self, expression):
        self.expression = expression

    def __repr__(self):
        return f"ExprStmt({self.expression})"


class Return(Node):
    def __init__(self, value=None):
        self.value = value

    def __repr__(self):
        return f"Return({self.value})"


class VarDecl(Node):
    def __init__(self, name, type_name, value):
        self.name = name
        self.type_name = type_name  # None -> taken from the initializer
        self.value = value

    def __repr__(self):
        return f"VarDecl(ID: {self.name}, Type: {self.type_name}, Value: {self.value})"


class Assign(Node):
    def __init__(self, name, value):
        self.name = name
        self.value = value

    def __repr__(self):
        return f"Assign(ID: {self.name}, Value: {self.value})"


class If(Node):
    def __init__(self, condition, then_body, else_body=None):
        self.condition = condition
        self.then_body = then_body
        self.else_body = else_body  # Block, a nested If, or None

    def __repr__(self):
        return f"If(Condition={self.condition}, Then={self.then_body}, Else={self.else_body})"


class While(Node):
    def __init__(self, condition, body):
        self.condition = condition
        self.body = body

    def __repr__(self):
        return f"While(Condition={self.condition}, Body={self.body})"


# Expressions
class Literal(Node):
    def __init__(self, value, kind="int"):
        self.value = value
        self.kind = kind  # "int" | "byte" | "str" (bytes value)

    def __repr__(self):
        return f"Literal({self.value!r})"


class Identifier(Node):
    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return f"Identifier({self.name})"


class Call(Node):
    def __init__(self, callee, args):
        self.callee = callee
        self.args = args

    def __repr__(self):
        return f"Call({self.callee}, Args={self.args})"


class BinaryOp(Node):
    ARITHMETIC = ("+", "-", "*", "/", "%")
    COMPARISON = ("==", "!=", "<", ">", "<=", ">=")

    def __init__(self, op, left, right):
        self.op = op
        self.left = left
        self.right = right

    def __repr__(self):
        return f"BinaryOp({self.left} {self.op} {self.right})"

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
from .peg import Choice, Many, Opt, Ref, Seq, Tok

TOKEN_MAP = {
    'LPAREN': "'('", 'RPAREN': "')'",
    'LBRACE': "'{'", 'RBRACE': "'}'",
    'SEMICOLON': "';'", 'COLON': "':'", 'COMMA': "','",
    'PLUS': "'+'", 'MINUS': "'-'", 'MULT': "'*'", 'DIV': "'/'", 'MOD': "'%'",
    'EQUAL': "'='", 'EQEQ': "'=='", 'NOTEQ': "'!='",
    'LT': "'<'", 'GT': "'>'", 'LTEQ': "'<='", 'GTEQ': "'>='",
    'ARROW': "'->'",
    'FUN': "'fun'", 'EXTERN': "'extern'", 'LET': "'let'", 'RETURN': "'return'",
    'IF': "'if'", 'ELSE': "'else'", 'WHILE': "'while'",
    'TYPE_INT': "'int'", 'TYPE_BYTE': "'byte'", 'TYPE_STR': "'str'", 'TYPE_VOID': "'void'",
    'IDENTIFIER': "identifier", 'STRING_LITERAL': "string",
    'INTEGER': "integer", 'BYTE_LITERAL': "byte",
    'EOF': "end of file",
}


def T(name):
    return Tok(name, TOKEN_MAP.get(name, name))


# ==============================================================================
#                                 PROGRAM STRUCTURE
# ==============================================================================
GRAMMAR = {
    "program": Seq(Many(Ref("item")), T("EOF")),
    "item": Choice(Ref("function"), Ref("extern"), Ref("statement")),

    # ==========================================================================
    #                              FUNCTIONS
    # ==========================================================================
    "function": Seq(
        T("FUN"), T("IDENTIFIER"),
        T("LPAREN"), Opt(Ref("params")), T("RPAREN"),
        Opt(Ref("ret_type")), Ref("block"),
    ),
    "extern": Seq(
        T("EXTERN"), T("FUN"), T("IDENTIFIER"),
        T("LPAREN"), Opt(Ref("params")), T("RPAREN"),
        Opt(Ref("ret_type")), T("SEMICOLON"),
    ),
    "params": Seq(Ref("param"), Many(Seq(T("COMMA"), Ref("param")))),
    "param": Seq(T("IDENTIFIER"), T("COLON"), Ref("type")),
    "ret_type": Seq(T("ARROW"), Ref("type")),
    "type": Choice(T("TYPE_INT"), T("TYPE_BYTE"), T("TYPE_STR"), T("TYPE_VOID")),

    # ==========================================================================
    #                              STATEMENTS
    # ==========================================================================
    "block": Seq(T("LBRACE"), Many(Ref("statement")), T("RBRACE")),
    "statement": Choice(
        Ref("block"),
        Ref("var_decl"),
        Ref("if_stmt"),
        Ref("while_stmt"),
        Ref("return_stmt"),
        Ref("assign"),
        Ref("expr_stmt"),
    ),
    "var_decl": Seq(
        T("LET"), T("IDENTIFIER"),
        Opt(Seq(T("COLON"), Ref("type"))),
        T("EQUAL"), Ref("expression"), T("SEMICOLON"),
    ),
    "if_stmt": Seq(
        T("IF"), Ref("expression"), Ref("block"),
        Opt(Seq(T("ELSE"), Choice(Ref("if_stmt"), Ref("block")))),
    ),
    "while_stmt": Seq(T("WHILE"), Ref("expression"), Ref("block")),
    "return_stmt": Seq(T("RETURN"), Opt(Ref("expression")), T("SEMICOLON")),
    "assign": Seq(T("IDENTIFIER"), T("EQUAL"), Ref("expression"), T("SEMICOLON")),
    "expr_stmt": Seq(Ref("expression"), T("SEMICOLON")),

    # ==========================================================================
    #                              EXPRESSIONS
    # ==========================================================================
    # Precedence climbs from comparison (loosest) to primary (tightest).
    "expression": Ref("comparison"),
    "comparison": Seq(Ref("additive"), Opt(Seq(Ref("cmp_op"), Ref("additive")))),
    "additive": Seq(Ref("term"), Many(Seq(Ref("add_op"), Ref("term")))),
    "term": Seq(Ref("primary"), Many(Seq(Ref("mul_op"), Ref("primary")))),
    "primary": Choice(Ref("call"), Ref("literal"), T("IDENTIFIER"), Ref("paren")),
    "paren": Seq(T("LPAREN"), Ref("expression"), T("RPAREN")),
    "call": Seq(T("IDENTIFIER"), T("LPAREN"), Opt(Ref("args")), T("RPAREN")),
    "args": Seq(Ref("expression"), Many(Seq(T("COMMA"), Ref("expression")))),
    "literal": Choice(T("INTEGER"), T("STRING_LITERAL"), T("BYTE_LITERAL")),

    "cmp_op": Choice(T("EQEQ"), T("NOTEQ"), T("LTEQ"), T("GTEQ"), T("LT"), T("GT")),
    "add_op": Choice(T("PLUS"), T("MINUS")),
    "mul_op": Choice(T("MULT"), T("DIV"), T("MOD")),
}

# Dispatch-only rules: their children are spliced into the parent node.
SILENT = frozenset({
    "item", "statement", "expression", "primary",
    "cmp_op", "add_op", "mul_op",
})

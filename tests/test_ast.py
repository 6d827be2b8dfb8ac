import pytest

from walter.ast2 import build_program, format_program
from walter.ast2.nodes import *
from walter.errors import MalformedNodeError, Span
from walter.parser import parse
from walter.parser.peg import ParseNode
from walter.utils.helpers import parse_code

SAMPLE = r'''
extern fun putchar(c: int) -> int;

fun add(a: int, b: int) -> int {
    return a + b * 2;
}

fun greet() {
    print("hi\n");
    return;
}

fun main() -> int {
    let total: int = add(1, 2);
    let c = 'x';
    while total < 10 {
        total = total + 1;
    }
    if total == 10 {
        greet();
    } else if total > 10 {
        putchar(c);
    } else {
        { let inner = "s"; }
    }
    return 0;
}
'''


class TestBuilder:
    def test_item_count_matches_top_level(self):
        program = parse_code(SAMPLE)
        tree = parse(SAMPLE)
        assert len(program.items) == len([c for c in tree.children if isinstance(c, ParseNode)])

    def test_function_shape(self):
        program = parse_code(SAMPLE)
        add = program.items[1]
        assert add == FunctionDecl(
            "add",
            [Param("a", "int"), Param("b", "int")],
            "int",
            Block([Return(BinaryOp("+", Identifier("a"), BinaryOp("*", Identifier("b"), Literal(2))))]),
        )

    def test_void_function_defaults(self):
        greet = parse_code(SAMPLE).items[2]
        assert greet.return_type == "void"
        assert greet.body.statements[0] == ExprStmt(Call("print", [Literal(b"hi\n", "str")]))
        assert greet.body.statements[1] == Return()

    def test_extern(self):
        ext = parse_code(SAMPLE).items[0]
        assert ext == ExternDecl("putchar", [Param("c", "int")], "int")

    def test_left_associative(self):
        stmt = parse_code("x = 1 - 2 - 3;").items[0]
        assert stmt.value == BinaryOp("-", BinaryOp("-", Literal(1), Literal(2)), Literal(3))

    def test_parens_build_no_node(self):
        stmt = parse_code("x = (1 - 2) * 3;").items[0]
        assert stmt.value == BinaryOp("*", BinaryOp("-", Literal(1), Literal(2)), Literal(3))

    def test_byte_literal_is_its_code(self):
        stmt = parse_code(r"let c = '\n';").items[0]
        assert stmt.value == Literal(10, "byte")

    def test_hex_escape(self):
        stmt = parse_code(r'let s = "\x41";').items[0]
        assert stmt.value == Literal(b"A", "str")

    def test_hex_escape_is_one_raw_byte(self):
        stmt = parse_code(r'let s = "\xff";').items[0]
        assert stmt.value == Literal(b"\xff", "str")

    def test_non_ascii_text_is_utf8(self):
        stmt = parse_code('let s = "é";').items[0]
        assert stmt.value == Literal("é".encode("utf-8"), "str")

    def test_latin1_byte_literal(self):
        stmt = parse_code("let c = 'é';").items[0]
        assert stmt.value == Literal(0xE9, "byte")

    def test_byte_literal_beyond_one_byte(self):
        with pytest.raises(MalformedNodeError):
            parse_code("let c = '€';")

    def test_else_if_chain(self):
        main = parse_code(SAMPLE).items[3]
        if_stmt = main.body.statements[3]
        assert isinstance(if_stmt, If)
        assert isinstance(if_stmt.else_body, If)
        assert isinstance(if_stmt.else_body.else_body, Block)

    def test_spans_are_attached(self):
        src = "let a = foo(1);"
        decl = parse_code(src).items[0]
        assert (decl.span.start, decl.span.end) == (0, len(src))
        call = decl.value
        assert src[call.span.start:call.span.end] == "foo(1)"

    def test_integer_out_of_range(self):
        with pytest.raises(MalformedNodeError) as exc:
            parse_code("let a = 2147483648;")
        assert exc.value.span.start == 8

    def test_unknown_escape(self):
        with pytest.raises(MalformedNodeError):
            parse_code(r'print("\q");')

    def test_unknown_rule(self):
        with pytest.raises(MalformedNodeError):
            build_program(ParseNode("program", Span(0, 0), [ParseNode("mystery", Span(0, 0), [])]))

    def test_root_must_be_program(self):
        with pytest.raises(MalformedNodeError):
            build_program(ParseNode("block", Span(0, 0), []))


class TestPrinter:
    def test_round_trip(self):
        program = parse_code(SAMPLE)
        printed = format_program(program)
        assert parse_code(printed) == program

    def test_printing_is_stable(self):
        printed = format_program(parse_code(SAMPLE))
        assert format_program(parse_code(printed)) == printed

    def test_layout(self):
        program = parse_code("fun f(a: int) -> int { if a { return 1; } else { return 2; } }")
        assert format_program(program) == (
            "fun f(a: int) -> int {\n"
            "    if a {\n"
            "        return 1;\n"
            "    } else {\n"
            "        return 2;\n"
            "    }\n"
            "}\n"
        )

    def test_escapes_are_reprinted(self):
        program = Program([ExprStmt(Call("print", [Literal(b'a"\t', "str")]))])
        assert format_program(program) == 'print("a\\"\\t");\n'

    def test_non_ascii_byte_round_trip(self):
        program = parse_code("let c = 'é';")
        printed = format_program(program)
        assert printed == "let c = '\\xe9';\n"
        assert parse_code(printed) == program

    def test_control_byte_round_trip(self):
        program = parse_code(r"let c = '\x01';")
        printed = format_program(program)
        assert printed == "let c = '\\x01';\n"
        assert parse_code(printed) == program

    def test_raw_string_bytes_round_trip(self):
        program = parse_code(r'print("\xff and é");')
        assert parse_code(format_program(program)) == program

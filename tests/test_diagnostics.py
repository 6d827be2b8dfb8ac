from walter.diagnostics import render, report
from walter.errors import ConfigError, ExternalToolError, ParseError, Span, UndefinedFunctionError


class TestRender:
    SOURCE = "let a = 1;\nfoo(a);\n"

    def test_source_excerpt_with_carets(self):
        err = UndefinedFunctionError("Call to undefined function 'foo'", Span(11, 17, 2, 1))
        text = render(err, self.SOURCE, "main.rl", color=False)
        lines = text.splitlines()
        assert lines[0] == "error: Call to undefined function 'foo'"
        assert lines[1] == "   --> main.rl:2:1"
        assert lines[3] == " 2 | foo(a);"
        assert lines[4] == "   | ^^^^^^ here"

    def test_parse_error_hint_and_rules(self):
        err = ParseError("Unexpected 'let'", Span(10, 13, 2, 1), expected=["';'"], rules=["var_decl"])
        text = render(err, "let a = 1\nlet b = 2;", "x.rl", color=False)
        assert "= help: expected one of: ';'" in text
        assert "= note: while matching var_decl" in text

    def test_end_of_file_location(self):
        err = ParseError("Unexpected end of file", Span(9, 9, 2, 1))
        text = render(err, "fun f() {", "x.rl", color=False)
        assert "x.rl:2:1" in text
        assert "^" not in text

    def test_external_tool_has_no_excerpt(self):
        err = ExternalToolError("'cc' failed", tool="cc", output="warning\nld: cannot find -lstd\n")
        text = render(err, "let a = 1;", "main.rl", color=False)
        assert "-->" not in text
        assert "= help: ld: cannot find -lstd" in text
        assert "reported by cc" in text

    def test_config_error_has_no_location(self):
        text = render(ConfigError("No walter.yml found"), color=False)
        assert text == "error: No walter.yml found"

    def test_colors(self):
        err = UndefinedFunctionError("boom", Span(0, 1, 1, 1))
        assert "\033[" in render(err, "x", "f", color=True)

    def test_report_writes_to_stream(self, capsys):
        report(ConfigError("bad"))
        assert "error: bad" in capsys.readouterr().err

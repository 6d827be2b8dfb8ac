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
import sys

from .errors import CompileError, ExternalToolError, ConfigError, ParseError


class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[38;5;196m"
    YELLOW = "\033[38;5;214m"
    BLUE = "\033[38;5;39m"
    CYAN = "\033[38;5;51m"
    GRAY = "\033[38;5;240m"


class _NoColors:
    RESET = BOLD = RED = YELLOW = BLUE = CYAN = GRAY = ""


def render(error: CompileError, source: str = "", filename: str = "<stdin>", color: bool = True) -> str:
    """
    Formats a compile error rustc-style:

        error: Call to undefined function 'foo'
           --> main.rl:3:5
            |
          3 |     foo();
            |     ^^^^^ here
           = help: ...
    """
    c = Colors if color else _NoColors
    out = [f"{c.RED}{c.BOLD}error:{c.RESET} {error.message}"]

    span = error.span
    lines = source.splitlines()
    if isinstance(error, (ExternalToolError, ConfigError)):
        span = None
    if span is None:
        if not isinstance(error, (ExternalToolError, ConfigError)):
            out.append(f"{c.BLUE}   -->{c.RESET} {filename}:[Unknown Location]")
    elif 0 < span.line <= len(lines):
        line_content = lines[span.line - 1].replace("\t", " ")
        out.append(f"{c.BLUE}   -->{c.RESET} {filename}:{span.line}:{span.column}")

        line_str = str(span.line)
        padding = " " * len(line_str)
        # The caret run stops at the end of the first line of the span.
        width = max(1, min(span.end - span.start, len(line_content) - span.column + 1))

        out.append(f"{c.BLUE} {padding} |{c.RESET}")
        out.append(f"{c.BLUE} {line_str} |{c.RESET} {line_content}")
        pointer_pad = " " * (span.column - 1)
        out.append(f"{c.BLUE} {padding} |{c.RESET} {pointer_pad}{c.RED}{c.BOLD}{'^' * width} here{c.RESET}")
    else:
        # Past the last line (end of file).
        out.append(f"{c.BLUE}   -->{c.RESET} {filename}:{span.line}:{span.column}")

    if error.hint:
        out.append(f"{c.CYAN}   = help:{c.RESET} {error.hint}")
    if isinstance(error, ParseError) and error.rules:
        out.append(f"{c.GRAY}   = note: while matching {', '.join(error.rules)}{c.RESET}")
    if isinstance(error, ExternalToolError) and error.tool:
        out.append(f"{c.GRAY}   = note: reported by {error.tool}{c.RESET}")
    return "\n".join(out)


def report(error: CompileError, source: str = "", filename: str = "<stdin>", stream=None):
    stream = stream or sys.stderr
    color = hasattr(stream, "isatty") and stream.isatty()
    print("\n" + render(error, source, filename, color=color), file=stream)

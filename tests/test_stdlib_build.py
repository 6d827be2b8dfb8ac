import os
import subprocess

import pytest

from walter import linker, stdlib_build
from walter.errors import ExternalToolError


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("WALTER_HOME", str(tmp_path / "home"))
    return tmp_path / "home"


@pytest.fixture
def commands(monkeypatch):
    """Records subprocess calls; cargo build leaves an archive behind."""
    calls = []

    def fake_run(args, cwd=None, **kwargs):
        calls.append((list(args), cwd))
        if args[:2] == ["git", "clone"]:
            os.makedirs(os.path.join(args[-1], ".git"))
        elif args[:2] == ["cargo", "build"]:
            out = os.path.join(cwd, "target", "release")
            os.makedirs(out, exist_ok=True)
            open(os.path.join(out, "libstd.a"), "wb").close()
        return subprocess.CompletedProcess(args, 0, "", "")

    monkeypatch.setattr(stdlib_build.subprocess, "run", fake_run)
    return calls


class TestStdlibBuild:
    def test_home_override(self, home):
        assert stdlib_build.stdlib_dir() == str(home / "stdlib")

    def test_default_home(self, monkeypatch):
        monkeypatch.delenv("WALTER_HOME", raising=False)
        assert stdlib_build.walter_home() == os.path.join(os.path.expanduser("~"), ".walter")

    def test_first_build_clones(self, home, commands):
        path = stdlib_build.build_libstd()
        assert path == str(home / "stdlib" / "libstd.a")
        assert os.path.isfile(path)
        assert [c[0][:2] for c in commands] == [["git", "clone"], ["cargo", "build"], ["cargo", "clean"]]
        assert stdlib_build.STDLIB_URL in commands[0][0]

    def test_second_build_pulls(self, home, commands):
        stdlib_build.build_libstd()
        stdlib_build.build_libstd()
        assert commands[3][0][:2] == ["git", "pull"]
        assert commands[3][1] == str(home / "stdlib")

    def test_failing_tool(self, home, monkeypatch):
        def failing(args, cwd=None, **kwargs):
            return subprocess.CompletedProcess(args, 128, "", "fatal: unable to access\n")

        monkeypatch.setattr(stdlib_build.subprocess, "run", failing)
        with pytest.raises(ExternalToolError) as exc:
            stdlib_build.build_libstd()
        assert exc.value.tool == "git"
        assert exc.value.hint == "fatal: unable to access"

    def test_missing_tool(self, monkeypatch):
        def missing(args, cwd=None, **kwargs):
            raise FileNotFoundError(args[0])

        monkeypatch.setattr(stdlib_build.subprocess, "run", missing)
        with pytest.raises(ExternalToolError):
            stdlib_build.run_tool(["cargo", "build"])


class TestLinker:
    def test_command_line(self, commands, monkeypatch):
        monkeypatch.setenv("CC", "clang")
        linker.link("a.o", "out", "libstd.a", release=True)
        assert commands == [(["clang", "-O3", "a.o", "libstd.a", "-o", "out"], None)]

    def test_default_compiler_without_std(self, commands, monkeypatch):
        monkeypatch.delenv("CC", raising=False)
        linker.link("a.o", "out")
        assert commands == [(["cc", "-O0", "a.o", "-o", "out"], None)]

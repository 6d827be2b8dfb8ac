import os

import pytest
import yaml
from llvmlite import ir

from walter import driver
from walter.codegen.target import emit_object
from walter.errors import ExternalToolError
from walter.project import BuildMode, TargetConfig


def broken_module(*args, **kwargs):
    module = ir.Module(name="broken")
    fn = ir.Function(module, ir.FunctionType(ir.IntType(32), []), name="main")
    fn.append_basic_block("entry")
    return module


@pytest.fixture
def project(tmp_path):
    assert driver.run_new("demo", str(tmp_path)) == 0
    return tmp_path / "demo"


@pytest.fixture
def linked(monkeypatch):
    calls = []

    def fake_link(obj, output, std_path=None, release=False):
        calls.append((obj, output, std_path, release))
        return output

    monkeypatch.setattr(driver, "link", fake_link)
    return calls


class TestNew:
    def test_scaffold(self, project):
        with open(project / "walter.yml") as f:
            assert yaml.safe_load(f) == {"name": "demo", "version": "0.1.0"}
        assert (project / "src" / "main.rl").read_text() == driver.NEW_PROJECT_SOURCE

    def test_existing_destination(self, project, capsys):
        assert driver.run_new("demo", str(project.parent)) == 1
        assert "already exists" in capsys.readouterr().err

    def test_parent_is_a_file(self, tmp_path, capsys):
        (tmp_path / "taken").write_text("")
        assert driver.run_new("demo", str(tmp_path / "taken")) == 1
        assert "Cannot create project" in capsys.readouterr().err


class TestCheck:
    def test_ok(self, tmp_path):
        path = tmp_path / "ok.rl"
        path.write_text('print("hi");\n')
        assert driver.run_check(str(path)) == 0

    def test_error_is_rendered(self, tmp_path, capsys):
        path = tmp_path / "bad.rl"
        path.write_text("let a = 1;\nfoo(a);\n")
        assert driver.run_check(str(path)) == 1
        err = capsys.readouterr().err
        assert "error: Call to undefined function 'foo'" in err
        assert f"{path}:2:1" in err

    def test_missing_file(self, tmp_path, capsys):
        assert driver.run_check(str(tmp_path / "nope.rl")) == 1
        assert "Cannot read" in capsys.readouterr().err

    def test_deep_nesting_is_rendered(self, tmp_path, capsys):
        path = tmp_path / "deep.rl"
        path.write_text("let a = " + "(" * 1000 + "1" + ")" * 1000 + ";\n")
        assert driver.run_check(str(path)) == 1
        err = capsys.readouterr().err
        assert "error: Program is nested too deeply" in err
        assert f"{path}:1:" in err


class TestCook:
    def test_debug_build_without_std(self, project, linked):
        assert driver.run_cook(str(project), no_std=True) == 0
        obj = BuildMode(False).object_path(str(project), "demo")
        assert os.path.isfile(obj)
        assert os.path.getsize(obj) > 0
        assert linked == [(obj, BuildMode(False).executable_path(str(project), "demo"), None, False)]

    def test_release_build_links_stdlib(self, project, linked, monkeypatch):
        monkeypatch.setattr(driver, "build_libstd", lambda: "/fake/libstd.a")
        assert driver.run_cook(str(project), release=True, emit_ir=True) == 0
        mode = BuildMode(True)
        assert os.path.isfile(mode.object_path(str(project), "demo"))
        assert os.path.isfile(os.path.join(mode.build_dir(str(project)), "demo.ll"))
        assert linked[0][2:] == ("/fake/libstd.a", True)

    def test_verification_failure_writes_nothing(self, project, linked, monkeypatch, capsys):
        monkeypatch.setattr(driver, "generate_module", broken_module)
        assert driver.run_cook(str(project), no_std=True) == 1
        assert not os.path.exists(BuildMode(False).object_path(str(project), "demo"))
        assert linked == []
        assert "Module verification failed" in capsys.readouterr().err

    def test_compile_error_in_source(self, project, linked, capsys):
        (project / "src" / "main.rl").write_text("fun f() -> int { }\n")
        assert driver.run_cook(str(project), no_std=True) == 1
        assert "missing a return statement" in capsys.readouterr().err
        assert linked == []

    def test_missing_manifest(self, tmp_path, capsys):
        assert driver.run_cook(str(tmp_path), no_std=True) == 1
        assert "No walter.yml" in capsys.readouterr().err

    def test_unwritable_build_dir(self, project, linked, capsys):
        (project / "build").write_text("")
        assert driver.run_cook(str(project), no_std=True, emit_ir=True) == 1
        assert "Cannot write to" in capsys.readouterr().err
        assert linked == []


class TestEmitObject:
    def test_unwritable_destination(self, lower, tmp_path):
        (tmp_path / "taken").write_text("")
        with pytest.raises(ExternalToolError) as exc:
            emit_object(lower('print("x");'), TargetConfig(), str(tmp_path / "taken" / "main.o"))
        assert "Cannot write object file" in exc.value.message

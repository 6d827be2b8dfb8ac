import pytest
import yaml
from llvmlite import binding

from walter.errors import ConfigError
from walter.project import BuildMode, Project, TargetConfig


def write_manifest(path, data):
    (path / "walter.yml").write_text(data if isinstance(data, str) else yaml.safe_dump(data))


class TestTargetConfig:
    def test_host_defaults(self):
        cfg = TargetConfig()
        assert cfg.triple == binding.get_default_triple()
        assert (cfg.reloc, cfg.code_model) == ("pic", "default")

    def test_opt_levels(self):
        assert TargetConfig.opt_level(True) == 3
        assert TargetConfig.opt_level(False) == 0

    def test_bad_reloc(self):
        with pytest.raises(ConfigError):
            TargetConfig(reloc="position-independent")

    def test_unknown_key(self):
        with pytest.raises(ConfigError):
            TargetConfig.from_dict({"arch": "x86"})


class TestProject:
    def test_load(self, tmp_path):
        write_manifest(tmp_path, {"name": "demo", "target": {"triple": "x86_64-unknown-linux-gnu", "reloc": "static"}})
        project = Project.from_path(str(tmp_path))
        assert project.name == "demo"
        assert project.version == "0.1.0"
        assert project.target.triple == "x86_64-unknown-linux-gnu"
        assert project.target.reloc == "static"
        assert project.source_path == str(tmp_path / "src" / "main.rl")

    def test_missing_manifest(self, tmp_path):
        with pytest.raises(ConfigError) as exc:
            Project.from_path(str(tmp_path))
        assert exc.value.hint is not None

    def test_invalid_yaml(self, tmp_path):
        write_manifest(tmp_path, "name: [demo")
        with pytest.raises(ConfigError) as exc:
            Project.from_path(str(tmp_path))
        assert exc.value.message.startswith("Invalid walter.yml:")
        assert "line 1" in exc.value.message

    def test_numeric_version(self, tmp_path):
        write_manifest(tmp_path, "name: demo\nversion: 1.2\n")
        assert Project.from_path(str(tmp_path)).version == "1.2"

    def test_empty_manifest(self, tmp_path):
        write_manifest(tmp_path, "")
        with pytest.raises(ConfigError) as exc:
            Project.from_path(str(tmp_path))
        assert "mapping" in exc.value.message

    def test_missing_name(self, tmp_path):
        write_manifest(tmp_path, {"version": "1.0"})
        with pytest.raises(ConfigError):
            Project.from_path(str(tmp_path))

    def test_target_must_be_mapping(self, tmp_path):
        write_manifest(tmp_path, {"name": "demo", "target": "x86"})
        with pytest.raises(ConfigError):
            Project.from_path(str(tmp_path))


class TestBuildMode:
    def test_paths(self, tmp_path):
        root = str(tmp_path)
        assert BuildMode(False).object_path(root, "demo") == str(tmp_path / "build" / "debug" / "demo.redd.it.o")
        assert BuildMode(True).executable_path(root, "demo") == str(tmp_path / "build" / "release" / "demo")

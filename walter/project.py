"""
Project configuration: the walter.yml manifest and the target it builds for.
"""
import logging
import os
from dataclasses import dataclass, field

import yaml
from llvmlite import binding

from .errors import ConfigError

log = logging.getLogger("walter.project")

MANIFEST = "walter.yml"
SOURCE_DIR = "src"
ENTRY_SOURCE = "main.rl"

RELOC_MODES = ("default", "static", "pic", "dynamicnopic")
CODE_MODELS = ("default", "jitdefault", "small", "kernel", "medium", "large")


def _yaml_problem(e: yaml.YAMLError) -> str:
    mark = getattr(e, "problem_mark", None)
    problem = getattr(e, "problem", None) or str(e)
    if mark is None:
        return problem
    return f"{problem} (line {mark.line + 1}, column {mark.column + 1})"


def host_triple() -> str:
    return binding.get_default_triple()


@dataclass
class TargetConfig:
    triple: str = field(default_factory=host_triple)
    cpu: str = ""
    features: str = ""
    reloc: str = "pic"
    code_model: str = "default"

    def __post_init__(self):
        if self.reloc not in RELOC_MODES:
            raise ConfigError(f"Unknown relocation mode '{self.reloc}'",
                              hint="one of: " + ", ".join(RELOC_MODES))
        if self.code_model not in CODE_MODELS:
            raise ConfigError(f"Unknown code model '{self.code_model}'",
                              hint="one of: " + ", ".join(CODE_MODELS))

    @staticmethod
    def opt_level(release: bool) -> int:
        return 3 if release else 0

    @classmethod
    def from_dict(cls, data: dict) -> "TargetConfig":
        unknown = set(data) - {"triple", "cpu", "features", "reloc", "code_model"}
        if unknown:
            raise ConfigError(f"Unknown target key(s): {', '.join(sorted(unknown))}")
        for key, value in data.items():
            if not isinstance(value, str):
                raise ConfigError(f"Target key '{key}' must be a string")
        return cls(**data)


@dataclass
class BuildMode:
    release: bool = False

    @property
    def name(self) -> str:
        return "release" if self.release else "debug"

    def build_dir(self, root: str) -> str:
        return os.path.join(root, "build", self.name)

    def object_path(self, root: str, name: str) -> str:
        return os.path.join(self.build_dir(root), f"{name}.redd.it.o")

    def executable_path(self, root: str, name: str) -> str:
        return os.path.join(self.build_dir(root), name)


@dataclass
class Project:
    name: str
    path: str
    version: str = "0.1.0"
    target: TargetConfig = field(default_factory=TargetConfig)

    @property
    def source_path(self) -> str:
        return os.path.join(self.path, SOURCE_DIR, ENTRY_SOURCE)

    @classmethod
    def from_path(cls, path: str) -> "Project":
        manifest = os.path.join(path, MANIFEST)
        try:
            with open(manifest, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigError(f"No {MANIFEST} found in '{path}'",
                              hint="create one with 'walter new --name <name>'") from None
        except OSError as e:
            raise ConfigError(f"Cannot read '{manifest}': {e.strerror}") from None
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid {MANIFEST}: {_yaml_problem(e)}") from None

        if not isinstance(data, dict):
            raise ConfigError(f"{MANIFEST} must contain a mapping")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ConfigError(f"{MANIFEST} is missing a 'name'")
        # 'version: 1.0' loads as a float.
        version = data.get("version", "0.1.0")
        if isinstance(version, bool) or not isinstance(version, (str, int, float)):
            raise ConfigError("'version' must be a string")
        target = data.get("target")
        if target is None:
            target = {}
        if not isinstance(target, dict):
            raise ConfigError("'target' must be a mapping")

        project = cls(name, os.path.abspath(path), str(version), TargetConfig.from_dict(target))
        log.debug("loaded %r", project)
        return project

    def to_dict(self) -> dict:
        return {"name": self.name, "version": self.version}

"""
Pipeline entry points used by the CLI. Each run_* function returns the
process exit status; it is the only place compile errors are reported.
"""
import logging
import os
from typing import Optional

import yaml
from llvmlite import ir

from . import diagnostics
from .codegen.compiler import generate_module
from .codegen.target import emit_object
from .errors import CompileError, ConfigError
from .linker import link
from .project import MANIFEST, SOURCE_DIR, ENTRY_SOURCE, BuildMode, Project, TargetConfig
from .stdlib_build import build_libstd
from .utils.helpers import parse_code

log = logging.getLogger("walter")

NEW_PROJECT_SOURCE = 'print("Hello, World!");\n'


def compile_source(source: str, filename: str = "<stdin>", target: Optional[TargetConfig] = None,
                   module_name: str = "main") -> ir.Module:
    """Parse, build the AST, lower and verify. Raises CompileError on the first problem."""
    log.info("Lexing/Parsing %s", filename)
    program = parse_code(source)
    log.info("Converting AST to LLVM")
    return generate_module(program, target, module_name)


def _read(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise ConfigError(f"Cannot read '{path}': {e.strerror}") from None


def run_check(path: str) -> int:
    source = ""
    try:
        source = _read(path)
        compile_source(source, path)
    except CompileError as e:
        diagnostics.report(e, source, path)
        return 1
    log.info("%s: no errors", path)
    return 0


def run_cook(project_dir: str = ".", release: bool = False, no_std: bool = False,
             emit_ir: bool = False) -> int:
    source, filename = "", os.path.join(project_dir, SOURCE_DIR, ENTRY_SOURCE)
    try:
        project = Project.from_path(project_dir)
        filename = project.source_path
        mode = BuildMode(release)

        std_path = None
        if not no_std:
            std_path = build_libstd()

        source = _read(filename)
        module = compile_source(source, filename, project.target, project.name)

        build_dir = mode.build_dir(project.path)
        try:
            os.makedirs(build_dir, exist_ok=True)
            if emit_ir:
                ir_path = os.path.join(build_dir, f"{project.name}.ll")
                with open(ir_path, "w", encoding="utf-8") as f:
                    f.write(str(module))
                log.info("Wrote IR to %s", ir_path)
        except OSError as e:
            raise ConfigError(f"Cannot write to '{build_dir}': {e.strerror}") from None

        log.info("Compiling")
        obj = emit_object(module, project.target, mode.object_path(project.path, project.name), release)

        log.info("Linking")
        exe = link(obj, mode.executable_path(project.path, project.name), std_path, release)
    except CompileError as e:
        diagnostics.report(e, source, filename)
        return 1

    log.info("Done! Executable is available at %s", exe)
    return 0


def run_new(name: str, parent: str = ".") -> int:
    path = os.path.join(parent, name)
    try:
        if os.path.exists(path):
            raise ConfigError(f"Destination '{path}' already exists")
        try:
            os.makedirs(os.path.join(path, SOURCE_DIR))
            with open(os.path.join(path, MANIFEST), "w", encoding="utf-8") as f:
                yaml.safe_dump(Project(name, path).to_dict(), f, sort_keys=False)
            with open(os.path.join(path, SOURCE_DIR, ENTRY_SOURCE), "w", encoding="utf-8") as f:
                f.write(NEW_PROJECT_SOURCE)
        except OSError as e:
            raise ConfigError(f"Cannot create project in '{path}': {e.strerror}") from None
    except CompileError as e:
        diagnostics.report(e)
        return 1
    log.info("Created project '%s' in %s", name, path)
    return 0

import logging
import os
from typing import Optional

from .stdlib_build import run_tool

log = logging.getLogger("walter.linker")


def linker_command() -> str:
    return os.environ.get("CC") or "cc"


def link(object_path: str, output: str, std_path: Optional[str] = None, release: bool = False) -> str:
    """Links the object (and the stdlib archive, if any) into an executable."""
    args = [linker_command(), "-O3" if release else "-O0", object_path]
    if std_path:
        args.append(std_path)
    args += ["-o", output]
    run_tool(args)
    log.debug("linked %s", output)
    return output

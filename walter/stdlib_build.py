"""
Fetches and builds the standard library archive (libstd.a) that every
executable links against. The archive lives in the walter home directory,
~/.walter unless WALTER_HOME says otherwise.
"""
import logging
import os
import shutil
import subprocess
from typing import List

from .errors import ExternalToolError

log = logging.getLogger("walter.stdlib")

STDLIB_URL = "https://github.com/elijah629/redditlang-std"
STDLIB_BRANCH = "main"
ARCHIVE = "libstd.a"


def walter_home() -> str:
    return os.environ.get("WALTER_HOME") or os.path.join(os.path.expanduser("~"), ".walter")


def stdlib_dir() -> str:
    return os.path.join(walter_home(), "stdlib")


def archive_path() -> str:
    return os.path.join(stdlib_dir(), ARCHIVE)


def run_tool(args: List[str], cwd=None) -> subprocess.CompletedProcess:
    log.debug("running %s", " ".join(args))
    try:
        result = subprocess.run(args, cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError:
        raise ExternalToolError(f"'{args[0]}' was not found on PATH", tool=args[0]) from None
    if result.returncode != 0:
        raise ExternalToolError(
            f"'{' '.join(args)}' failed with exit code {result.returncode}",
            tool=args[0],
            output=result.stderr or result.stdout,
        )
    return result


def clone_else_pull(url: str, path: str, branch: str = STDLIB_BRANCH):
    """Clones 'url' into 'path', or fast-forwards the checkout that is already there."""
    if os.path.isdir(os.path.join(path, ".git")):
        log.info("Updating stdlib")
        run_tool(["git", "pull", "--ff-only", "origin", branch], cwd=path)
    else:
        log.info("Downloading stdlib")
        os.makedirs(os.path.dirname(path), exist_ok=True)
        run_tool(["git", "clone", "--branch", branch, url, path])


def build_libstd(url: str = STDLIB_URL) -> str:
    path = stdlib_dir()
    clone_else_pull(url, path)

    log.info("Building stdlib")
    run_tool(["cargo", "build", "--release"], cwd=path)
    built = os.path.join(path, "target", "release", ARCHIVE)
    if not os.path.isfile(built):
        raise ExternalToolError(f"cargo did not produce {ARCHIVE}", tool="cargo")
    shutil.move(built, archive_path())
    run_tool(["cargo", "clean"], cwd=path)
    return archive_path()

import argparse
import sys

from . import __version__, driver
from .utils import logger


def build_parser() -> argparse.ArgumentParser:
    prs = argparse.ArgumentParser(prog="walter", description="Walter compiler and build tool")
    prs.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    prs.add_argument("--version", action="version", version=f"walter {__version__}")
    sub = prs.add_subparsers(dest="command", required=True)

    cook = sub.add_parser("cook", help="Build the project in the current directory")
    cook.add_argument("--release", action="store_true", help="Optimised build (opt level 3)")
    cook.add_argument("--no-std", action="store_true", help="Do not fetch or link the standard library")
    cook.add_argument("--emit-ir", action="store_true", help="Also write the LLVM IR next to the object file")
    cook.add_argument("-C", "--directory", default=".", help="Project directory")

    new = sub.add_parser("new", help="Create a new project")
    new.add_argument("--name", required=True, help="Project name")

    check = sub.add_parser("check", help="Parse, lower and verify a single file")
    check.add_argument("file", help="Source file")
    return prs


def run(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logger.init(args.verbose)

    if args.command == "cook":
        return driver.run_cook(args.directory, args.release, args.no_std, args.emit_ir)
    if args.command == "new":
        return driver.run_new(args.name)
    return driver.run_check(args.file)


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()

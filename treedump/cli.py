#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
CLI entrypoint for treedump.

    treedump SOURCE [-o OUTPUT] [--[no-]follow-symlinks] [--[no-]progress]

Exit codes: 0 ok, 1 missing source directory, 2 usage/config error,
3 output write failure.
"""

import argparse
import sys
from pathlib import Path

from treedump import __version__
from treedump.config import DEFAULT_OUTPUT, ENV_OUTPUT, ENV_SOURCE, resolve_config
from treedump.dumper import dump_tree
from treedump.errors import ConfigError, MissingSourceDirectory, OutputWriteFailure


EXIT_OK = 0
EXIT_MISSING_SOURCE = 1
EXIT_USAGE = 2
EXIT_WRITE_FAILURE = 3


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="treedump",
        description="treedump: concatenate every file under a directory into one text dump",
    )
    p.add_argument(
        "source", nargs="?", default=None,
        help=f"directory to dump (default: ${ENV_SOURCE})",
    )
    p.add_argument(
        "-o", "--output", default=None,
        help=f"output file (default: ${ENV_OUTPUT} or {DEFAULT_OUTPUT})",
    )
    p.add_argument(
        "--follow-symlinks", action=argparse.BooleanOptionalAction, default=None,
        help="dump linked files and descend linked directories (default: $TREEDUMP_FOLLOW_SYMLINKS or off)",
    )
    p.add_argument(
        "--progress", action=argparse.BooleanOptionalAction, default=None,
        help="show a progress counter on stderr (default: $TREEDUMP_PROGRESS or off)",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = resolve_config(args)
    except ConfigError as e:
        parser.print_usage(sys.stderr)
        print(f"[error] {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        stats = dump_tree(
            cfg.source, cfg.output,
            follow_symlinks=cfg.follow_symlinks,
            progress=cfg.progress,
        )
    except MissingSourceDirectory as e:
        print(f"[error] {e}", file=sys.stderr)
        return EXIT_MISSING_SOURCE
    except OutputWriteFailure as e:
        print(f"[error] {e}", file=sys.stderr)
        return EXIT_WRITE_FAILURE

    print(
        f"[done] Dumped {stats.files} file(s) ({stats.bytes} bytes) "
        f"to {Path(cfg.output).resolve()}"
    )
    return EXIT_OK


def run():
    """
    Dispatcher for the `treedump` console script.
    """
    sys.exit(main())


# Allow running: python -m treedump.cli
if __name__ == "__main__":
    run()

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
treedump.dumper
===============

Walks a directory tree and appends every regular file to one output file:

    ===== 【<path>】 =====
    <raw bytes>
    <blank line>

- Output is truncated before the walk, even if no files are found
- Contents are copied byte-for-byte, nothing is escaped
- Unreadable files are skipped with a warning, their partial block is rolled back
- Symlinks are skipped unless follow_symlinks is set (cycle-safe)
"""

from __future__ import annotations

import os
import stat
import sys
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Tuple

from tqdm import tqdm

from treedump.errors import (
    MissingSourceDirectory,
    OutputWriteFailure,
    UnreadableFile,
    display_path,
)


CHUNK_SIZE = 64 * 1024
SEPARATOR = b"\n\n"


@dataclass
class DumpStats:
    files: int = 0
    bytes: int = 0
    skipped: List[Tuple[str, str]] = field(default_factory=list)


# ============================================================
# Format
# ============================================================

def delimiter(path: str) -> bytes:
    # fsencode keeps undecodable file names as their original bytes
    return "===== 【".encode("utf-8") + os.fsencode(path) + "】 =====\n".encode("utf-8")


# ============================================================
# Traversal
# ============================================================

def iter_regular_files(
    source: str,
    follow_symlinks: bool = False,
    on_error: Optional[Callable[[str, OSError], None]] = None,
) -> Iterator[Tuple[str, os.stat_result]]:
    """
    Yield (path, stat) for every regular file under source, in the
    order os.walk produces them.

    Without follow_symlinks, links are neither dumped nor descended.
    With it, each directory is entered at most once, keyed on
    (st_dev, st_ino), so link cycles terminate.
    """

    def report(err: OSError):
        if on_error is not None:
            on_error(err.filename or source, err)

    try:
        root = os.stat(source)
    except OSError as e:
        report(e)
        return
    seen = {(root.st_dev, root.st_ino)}

    for dirpath, dirnames, filenames in os.walk(
        source, onerror=report, followlinks=follow_symlinks
    ):
        if follow_symlinks:
            keep = []
            for d in dirnames:
                try:
                    st = os.stat(os.path.join(dirpath, d))
                except OSError as e:
                    report(e)
                    continue
                key = (st.st_dev, st.st_ino)
                if key in seen:
                    continue
                seen.add(key)
                keep.append(d)
            dirnames[:] = keep

        for name in filenames:
            path = os.path.join(dirpath, name)
            try:
                st = os.stat(path) if follow_symlinks else os.lstat(path)
            except FileNotFoundError as e:
                # a dangling link is not a file; a vanished entry is worth a warning
                if not os.path.islink(path):
                    report(e)
                continue
            except OSError as e:
                report(e)
                continue
            if stat.S_ISREG(st.st_mode):
                yield path, st


# ============================================================
# Copy
# ============================================================

def _copy_file(path: str, out) -> int:
    try:
        src = open(path, "rb")
    except OSError as e:
        raise UnreadableFile(path, e) from e

    copied = 0
    with src:
        out.write(delimiter(path))
        while True:
            try:
                chunk = src.read(CHUNK_SIZE)
            except OSError as e:
                raise UnreadableFile(path, e) from e
            if not chunk:
                break
            out.write(chunk)
            copied += len(chunk)
        out.write(SEPARATOR)
    return copied


def _warn(stats: DumpStats, path: str, reason: str):
    stats.skipped.append((path, reason))
    tqdm.write(f"[warn] Skipping {display_path(path)}: {reason}", file=sys.stderr)


# ============================================================
# Dump
# ============================================================

def dump_tree(source, output, follow_symlinks: bool = False,
              progress: bool = False) -> DumpStats:
    """
    Dump every regular file under source into output.

    Raises MissingSourceDirectory before touching output if source is
    not a directory, and OutputWriteFailure if output cannot be written.
    """
    source = os.fspath(source)
    output = os.fspath(output)

    if not os.path.isdir(source):
        raise MissingSourceDirectory(source)

    stats = DumpStats()

    try:
        with open(output, "wb") as out:
            own = os.fstat(out.fileno())
            own_key = (own.st_dev, own.st_ino)

            files = iter_regular_files(
                source,
                follow_symlinks,
                on_error=lambda p, e: _warn(stats, p, e.strerror or str(e)),
            )

            with tqdm(files, desc="treedump", unit="file",
                      disable=not progress, file=sys.stderr) as bar:
                for path, st in bar:
                    if (st.st_dev, st.st_ino) == own_key:
                        _warn(stats, path, "it is the output file")
                        continue

                    start = out.tell()
                    try:
                        stats.bytes += _copy_file(path, out)
                    except UnreadableFile as e:
                        # drop the half-written block, earlier blocks stay intact
                        out.seek(start)
                        out.truncate()
                        _warn(stats, path, e.cause.strerror or str(e.cause))
                        continue
                    stats.files += 1
    except OSError as e:
        raise OutputWriteFailure(output, e) from e

    return stats

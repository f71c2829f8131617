# treedump/config.py
"""
Run settings: command line first, then TREEDUMP_* environment variables,
then defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from treedump.errors import ConfigError


DEFAULT_OUTPUT = "./ebpf.txt"

ENV_SOURCE = "TREEDUMP_SOURCE"
ENV_OUTPUT = "TREEDUMP_OUTPUT"
ENV_FOLLOW_SYMLINKS = "TREEDUMP_FOLLOW_SYMLINKS"
ENV_PROGRESS = "TREEDUMP_PROGRESS"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class DumpConfig:
    source: Path
    output: Path
    follow_symlinks: bool = False
    progress: bool = False


def env_flag(environ, name: str, default: bool = False) -> bool:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be one of 1/0, true/false, yes/no, on/off (got {raw!r})")


def resolve_config(args, environ=None) -> DumpConfig:
    if environ is None:
        environ = os.environ

    source = getattr(args, "source", None) or environ.get(ENV_SOURCE)
    if not source:
        raise ConfigError(f"No source directory given (pass SOURCE or set {ENV_SOURCE})")

    output = getattr(args, "output", None) or environ.get(ENV_OUTPUT) or DEFAULT_OUTPUT

    follow = getattr(args, "follow_symlinks", None)
    if follow is None:
        follow = env_flag(environ, ENV_FOLLOW_SYMLINKS)

    progress = getattr(args, "progress", None)
    if progress is None:
        progress = env_flag(environ, ENV_PROGRESS)

    return DumpConfig(
        source=Path(source),
        output=Path(output),
        follow_symlinks=follow,
        progress=progress,
    )

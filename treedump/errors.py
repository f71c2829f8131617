# treedump/errors.py
"""
Exceptions raised by the dumper and the config layer.
Only the CLI maps them to exit codes.
"""

import os


def display_path(path) -> str:
    # undecodable bytes are shown as \xNN so strict consoles can print them
    return os.fsencode(path).decode("utf-8", "backslashreplace")


class DumpError(Exception):
    pass


class ConfigError(DumpError):
    pass


class MissingSourceDirectory(DumpError):
    def __init__(self, path):
        self.path = path
        super().__init__(
            f"Source directory {display_path(path)} does not exist or is not a directory"
        )


class UnreadableFile(DumpError):
    def __init__(self, path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot read {display_path(path)}: {cause.strerror or cause}")


class OutputWriteFailure(DumpError):
    def __init__(self, path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(
            f"Cannot write output {display_path(path)}: {cause.strerror or cause}"
        )

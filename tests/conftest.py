import re

import pytest


BLOCK_RE = re.compile("===== 【(.*?)】 =====\n".encode("utf-8"))


def split_blocks(data: bytes):
    """
    Split a dump back into {path: contents}.

    Only safe for dumps whose file contents do not contain the marker.
    """
    marks = list(BLOCK_RE.finditer(data))
    blocks = {}
    for i, m in enumerate(marks):
        end = marks[i + 1].start() if i + 1 < len(marks) else len(data)
        body = data[m.end():end]
        assert body.endswith(b"\n\n")
        blocks[m.group(1).decode("utf-8")] = body[:-2]
    return blocks


@pytest.fixture
def tree(tmp_path):
    src = tmp_path / "src"
    (src / "pkg" / "sub").mkdir(parents=True)
    (src / "a.txt").write_bytes(b"alpha\n")
    (src / "pkg" / "b.rs").write_bytes(b"fn main() {}\n")
    (src / "pkg" / "sub" / "c.bin").write_bytes(bytes(range(256)))
    (src / "pkg" / "empty").write_bytes(b"")
    return src

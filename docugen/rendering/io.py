"""Output of rendered documents."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import TextIO


def write_document(
    text: str,
    destination: Path | None = None,
    stream: TextIO | None = None,
    mode: int = 0o644,
) -> None:
    """Write a rendered document to a file, or to ``stream`` (stdout) when no
    destination is given.

    Args:
        text: Rendered document
        destination: Output file; replaced atomically
        stream: Fallback stream, defaults to ``sys.stdout``
        mode: File permissions (octal) of the written file
    """
    if destination is None:
        out = stream or sys.stdout
        out.write(text)
        out.flush()
        return

    destination.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{destination.name}.", dir=str(destination.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, destination)
    except BaseException:
        os.unlink(tmp_name)
        raise

"""
Atomic text/bytes writers used by the CLI, the JSON-LD writer, and save().

Overview
- Every write goes to a sibling tmp file, is fsynced, then renamed over the
  final path with os.replace, so readers never observe partial output.
- Parent directories are created on demand.

Notes
- Atomicity via os.replace is guaranteed only when src and dst reside on the same filesystem.
- Failures raise civitas.io.errors.IoWriteError; the tmp file is removed best-effort.
"""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

from .errors import IoWriteError

__all__ = ["write_bytes_atomic", "write_text_atomic"]

logger = logging.getLogger(__name__)


def write_bytes_atomic(path: str | os.PathLike[str], data: bytes) -> Path:
    """
    Write bytes to `path` atomically.

    Args:
        path: Destination file path.
        data: Payload.

    Returns:
        Path: The final path.

    Raises:
        IoWriteError: If the tmp write, fsync, or rename fails.
    """
    final = Path(path)
    tmp = final.with_name(f".{final.name}.{uuid.uuid4().hex}.tmp")
    try:
        final.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, final)
    except OSError as exc:
        try:
            if tmp.exists():
                tmp.unlink()
        except OSError:
            logger.debug("could not remove tmp file %s", tmp)
        raise IoWriteError(f"failed to write {final}: {exc}") from exc
    logger.debug("wrote %d bytes to %s", len(data), final)
    return final


def write_text_atomic(path: str | os.PathLike[str], text: str, encoding: str = "utf-8") -> Path:
    """Write text to `path` atomically (see write_bytes_atomic)."""
    return write_bytes_atomic(path, text.encode(encoding))

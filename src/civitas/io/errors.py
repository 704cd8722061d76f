"""
Custom exceptions for the civitas.io module.

Purpose
- Provide IO-layer error types distinct from civitas.core (grammar/view/stat).

Boundaries
- civitas.core.errors.GrammarError, ViewSpecError and StatError are raised by
  the plotting layer.
- civitas.io raises Io* errors for configuration, dataset and writer concerns:
  - IoConfigError: invalid settings or unparsable config files.
  - IoReadError: a dataset or YAML/markdown source could not be read.
  - IoWriteError: atomic write path failed (tmp write/fsync/rename).

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations

__all__ = [
    "IoError",
    "IoConfigError",
    "IoReadError",
    "IoWriteError",
]


class IoError(Exception):
    """
    Base class for IO-related errors in civitas.io.

    Notes:
        Use this as a catch-all for IO-layer failures, distinct from civitas.core errors.
    """


class IoConfigError(IoError):
    """
    Raised when configuration is invalid or unsupported.

    Examples:
        - Margin larger than half the figure
        - Explicit TOML path that does not parse
    """


class IoReadError(IoError):
    """
    Raised when an input file is missing, has an unsupported format, or does not parse.
    """


class IoWriteError(IoError):
    """
    Raised when a write operation fails to complete atomically.

    Notes:
        The write path is tmp file → fsync → os.replace(tmp, final). Failures at any step
        surface as IoWriteError (with best-effort cleanup of tmp files).
    """

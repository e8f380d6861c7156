"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Fatal error types raised by the pipeline stages.

Every error here aborts the whole run. Per-file read errors during hashing are
not represented: those files are logged and skipped by the checksum engine.
"""

from typing import Optional


class OneLinkError(RuntimeError):
    """Base class for all fatal onelink errors."""


class TraversalError(OneLinkError):
    """The directory walk could not continue, so the inventory is incomplete."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class LeftoverTempFileError(TraversalError):
    """A file carrying the reserved merge suffix was found under the root."""

    def __init__(self, path: str):
        super().__init__(
            f"'{path}' indicates a previous failed run, please investigate",
            path=path,
        )


class HashInitError(OneLinkError):
    """The hash algorithm could not be constructed."""


class MergeError(OneLinkError):
    """
    A filesystem operation failed while replacing a duplicate with a hardlink.

    Attributes:
        source: The duplicate path being replaced
        dest: The canonical file it was being linked to
        step: Which operation failed ("stat", "rename", "link" or "remove")
    """

    def __init__(self, step: str, source: str, dest: str, cause: Optional[BaseException] = None):
        message = f"{step} failed while deduping '{source}' with '{dest}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.step = step
        self.source = source
        self.dest = dest

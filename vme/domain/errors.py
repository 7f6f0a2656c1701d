# vme/domain/errors.py
from __future__ import annotations

from typing import Optional


class VmeError(RuntimeError):
    """
    Base for every failure that ends an invocation.
    `stage` names the pipeline step that failed and is shown to the user.
    """
    stage: str = "vme"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProbeExecutionError(VmeError):
    """ffprobe is missing, could not run, timed out or exited non-zero."""
    stage = "probe"

    def __init__(self, message: str, stderr: Optional[str] = None, rc: Optional[int] = None):
        super().__init__(message)
        self.stderr = stderr
        self.rc = rc

    def __str__(self) -> str:
        text = self.message
        if self.rc is not None:
            text += f" (exit code {self.rc})"
        detail = (self.stderr or "").strip()
        if detail:
            text += f": {detail}"
        return text


class ProbeParseError(VmeError):
    """ffprobe output is not JSON or does not match the expected schema."""
    stage = "probe"


class UnsupportedFormatError(VmeError, ValueError):
    stage = "export"


class SerializationError(VmeError):
    stage = "export"


class WriteError(VmeError):
    stage = "export"


class ObjectStoreError(VmeError):
    """Authentication, network or transfer failure against the object store."""
    stage = "storage"


class InvalidInputError(VmeError, ValueError):
    """Bad command-line arguments or a malformed object-store URI."""
    stage = "input"


class TaxonomyError(VmeError, ValueError):
    """A tag taxonomy violates its authoring rules (e.g. overlapping groups)."""
    stage = "taxonomy"

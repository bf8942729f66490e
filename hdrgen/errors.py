"""Exception hierarchy for header generation failures.

Every failure is fatal to the run; nothing here is meant to be caught and
retried inside the pipeline.
"""

from __future__ import annotations

from typing import Sequence


class GenerationError(RuntimeError):
    """Base class for unrecoverable build failures."""


class GrammarError(GenerationError):
    """Input contains a declaration shape the tokenizer does not support."""

    def __init__(self, message: str, *, filename: str | None = None, line: str | None = None) -> None:
        location = f" in {filename}" if filename else ""
        detail = f", stopped at: {line}" if line is not None else ""
        super().__init__(f"{message}{location}{detail}")
        self.reason = message
        self.filename = filename
        self.line = line


class SplitGuideError(GenerationError):
    """Split configuration is malformed or names declarations that do not exist."""

    def __init__(self, message: str, missing: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.missing = list(missing)


class ExhaustivenessError(GenerationError):
    """A declaration record would be dropped from every output file."""

    def __init__(self, omissions: Sequence[str]) -> None:
        joined = "; ".join(omissions)
        super().__init__(f"Unused records: {joined}")
        self.omissions = list(omissions)


class OpaqueTypeError(GenerationError):
    """Opaque type layouts and their documentation do not line up."""


__all__ = [
    "ExhaustivenessError",
    "GenerationError",
    "GrammarError",
    "OpaqueTypeError",
    "SplitGuideError",
]

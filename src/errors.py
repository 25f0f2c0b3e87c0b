"""Error taxonomy for modchanges.

Every failure is fatal for the run; nothing is retried and no partial result
is emitted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class ModChangesError(Exception):
    """Base class for all errors raised by modchanges."""


class PreconditionError(ModChangesError):
    """Raised before any query when the run cannot start."""


class ExternalCommandFailure(ModChangesError):
    """Raised when an external command times out or fails."""

    def __init__(
        self,
        args: Sequence[str],
        reason: str,
        stderr: str = "",
    ) -> None:
        self.command = tuple(args)
        self.reason = reason
        self.stderr = stderr
        msg = f"command {' '.join(self.command)!r} failed: {reason}"
        detail = stderr.strip()
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class DescriptorParseFailure(ModChangesError):
    """Raised when a build descriptor cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"cannot parse descriptor {path}: {reason}")


class UnresolvedReferenceError(ModChangesError):
    """Raised when history yields no marker for a listed directory."""

    def __init__(self, revision: str, path: str) -> None:
        self.revision = revision
        self.path = path
        super().__init__(f"invalid reference {revision!r} for {path}")


__all__ = [
    "DescriptorParseFailure",
    "ExternalCommandFailure",
    "ModChangesError",
    "PreconditionError",
    "UnresolvedReferenceError",
]

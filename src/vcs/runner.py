"""Blocking execution of external commands with explicit outcomes."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from errors import ExternalCommandFailure
from logs import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

logger = get_logger("vcs.runner")


@dataclass(frozen=True)
class CommandSuccess:
    args: tuple[str, ...]
    stdout: str


@dataclass(frozen=True)
class CommandFailure:
    args: tuple[str, ...]
    reason: str
    returncode: int | None = None
    stderr: str = ""

    def to_error(self) -> ExternalCommandFailure:
        return ExternalCommandFailure(self.args, self.reason, self.stderr)


CommandResult = CommandSuccess | CommandFailure


class CommandRunner(Protocol):
    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        timeout_seconds: float,
    ) -> CommandResult: ...


def run_command(
    args: Sequence[str],
    *,
    cwd: Path,
    timeout_seconds: float,
) -> CommandResult:
    """Run ``args`` inside ``cwd`` and capture its output.

    Args:
        args: Command line as an argv list (no shell is involved)
        cwd: Working directory for the process
        timeout_seconds: Hard limit after which the process is killed

    Returns:
        CommandSuccess with the captured stdout, or CommandFailure describing
        why the command did not succeed. A failure is never reported as
        empty output.
    """
    argv = tuple(args)
    logger.debug("running %s in %s", " ".join(argv), cwd)
    try:
        proc = subprocess.run(
            argv,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except subprocess.TimeoutExpired:
        return CommandFailure(argv, f"timed out after {timeout_seconds:g}s")
    except FileNotFoundError:
        return CommandFailure(argv, f"executable not found: {argv[0]}")
    except OSError as exc:
        return CommandFailure(argv, f"could not start: {exc}")

    if proc.returncode != 0:
        return CommandFailure(
            argv,
            f"exit status {proc.returncode}",
            returncode=proc.returncode,
            stderr=proc.stderr,
        )
    return CommandSuccess(argv, proc.stdout)


def require_success(result: CommandResult) -> str:
    """Return the stdout of a successful result or raise its failure."""
    if isinstance(result, CommandFailure):
        raise result.to_error()
    return result.stdout


__all__ = [
    "CommandFailure",
    "CommandResult",
    "CommandRunner",
    "CommandSuccess",
    "require_success",
    "run_command",
]

"""Git queries used to load module snapshots."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from logs import get_logger
from vcs.runner import CommandRunner, CommandSuccess, require_success, run_command

logger = get_logger("vcs.git")


class GitRepository:
    """Thin facade over the git command line for one working directory.

    Every path passed in or returned is relative to ``root``, which is the
    directory holding the root build descriptor (not necessarily the top of
    the work tree).
    """

    def __init__(
        self,
        root: Path,
        *,
        timeout_seconds: float,
        executable: str = "git",
        runner: CommandRunner = run_command,
    ) -> None:
        self.root = root.resolve()
        self.timeout_seconds = timeout_seconds
        self.executable = executable
        self._runner = runner

    def _run(self, *args: str) -> str:
        result = self._runner(
            [self.executable, *args],
            cwd=self.root,
            timeout_seconds=self.timeout_seconds,
        )
        return require_success(result)

    def is_inside_work_tree(self) -> bool:
        result = self._runner(
            [self.executable, "rev-parse", "--is-inside-work-tree"],
            cwd=self.root,
            timeout_seconds=self.timeout_seconds,
        )
        return isinstance(result, CommandSuccess) and result.stdout.strip() == "true"

    def head_commit(self) -> str:
        return self._run("rev-parse", "HEAD").strip()

    def current_ref(self) -> str:
        """Return the checked-out branch name, or the commit hash if detached."""
        result = self._runner(
            [self.executable, "symbolic-ref", "-q", "--short", "HEAD"],
            cwd=self.root,
            timeout_seconds=self.timeout_seconds,
        )
        if isinstance(result, CommandSuccess) and result.stdout.strip():
            return result.stdout.strip()
        return self.head_commit()

    def list_tracked_dirs(self, revision: str) -> list[str]:
        # -z keeps non-ASCII names verbatim instead of quoted octal escapes
        output = self._run("ls-tree", "-r", "-d", "-z", "--name-only", revision)
        return [name for name in output.split("\0") if name]

    def last_modified(self, revision: str, path: str, fmt: str) -> str:
        """Return the marker of the last commit touching ``path`` at ``revision``.

        An empty string means history has no such commit; the caller decides
        whether that is an error.
        """
        output = self._run("log", "-1", f"--format={fmt}", revision, "--", path)
        return output.strip().replace('"', "")

    def checkout(self, revision: str) -> None:
        logger.debug("checking out %s", revision)
        self._run("checkout", "-q", revision)


class CheckoutSession:
    """Switches the working tree while a :func:`checked_out_revision` is open."""

    def __init__(self, git: GitRepository, original: str) -> None:
        self.git = git
        self.original = original
        self.switched = False

    def switch(self, revision: str) -> None:
        # Mark first: a failed checkout may still leave the tree half-switched.
        self.switched = True
        self.git.checkout(revision)


@contextmanager
def checked_out_revision(git: GitRepository) -> Iterator[CheckoutSession]:
    """Own the checked-out revision for the duration of the block.

    The revision active on entry is restored on every exit path, including
    errors raised inside the block.
    """
    original = git.current_ref()
    session = CheckoutSession(git, original)
    try:
        yield session
    finally:
        if session.switched:
            git.checkout(original)


__all__ = ["CheckoutSession", "GitRepository", "checked_out_revision"]

"""Shared path utilities for modchanges."""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path


def to_repo_key(path: str | Path, root: Path) -> str:
    """Convert a path to the POSIX form git expects relative to ``root``.

    Args:
        path: Absolute path, or a path already relative to ``root``
        root: Directory the git commands run in

    Returns:
        Relative POSIX path, ``"."`` for the root itself

    Examples:
        >>> to_repo_key(Path("/repo/core"), Path("/repo"))
        'core'
        >>> to_repo_key(Path("/repo"), Path("/repo"))
        '.'
    """
    candidate = Path(path) if isinstance(path, Path) else Path(str(path).replace("\\", "/"))
    if candidate.is_absolute():
        candidate = candidate.relative_to(root)
    normalized_parts = [part for part in candidate.as_posix().split("/") if part and part != "."]
    if not normalized_parts:
        return "."
    return "/".join(normalized_parts)


def matches_filters(
    key: str,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    """Check a relative directory key against include/exclude globs."""
    if include_patterns and not any(fnmatch(key, pat) for pat in include_patterns):
        return False

    has_excluded_match = exclude_patterns and any(
        fnmatch(key, pat) for pat in exclude_patterns
    )
    return not has_excluded_match

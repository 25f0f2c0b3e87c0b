"""Load the set of modules existing at one revision."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from changes.model import EMPTY_SNAPSHOT, Module, Snapshot, module_from_descriptor
from descriptor.pom import parse_descriptor
from errors import UnresolvedReferenceError
from logs import get_logger
from utils import matches_filters

if TYPE_CHECKING:
    from pathlib import Path

    from settings.config import ModChangesConfig
    from vcs.git import GitRepository

logger = get_logger("changes.snapshot")


def _is_readable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.R_OK)


def find_descriptor_dirs(
    git: GitRepository,
    revision: str,
    config: ModChangesConfig,
) -> list[str]:
    """List tracked directories at ``revision`` that hold a readable descriptor.

    Candidates come from the tracked tree of the revision, never from a
    filesystem walk, so untracked build output is not picked up. The
    descriptor itself is read from the working tree.
    """
    candidates = [
        key
        for key in git.list_tracked_dirs(revision)
        if matches_filters(key, config.include, config.exclude)
    ]
    return [
        key
        for key in candidates
        if _is_readable_file(git.root / key / config.descriptor_filename)
    ]


def resolve_module(
    git: GitRepository,
    revision: str,
    key: str,
    config: ModChangesConfig,
    *,
    fallback_revision: str | None = None,
) -> Module:
    """Build a Module for directory ``key`` with a marker scoped to ``revision``.

    When the directory has no history at ``revision`` and a
    ``fallback_revision`` is given, the marker is taken from there instead.

    Raises:
        UnresolvedReferenceError: If history has no commit for the directory.
        DescriptorParseFailure: If the directory's descriptor is malformed.
    """
    marker = git.last_modified(revision, key, config.marker_format)
    if not marker and fallback_revision is not None:
        logger.debug("%s has no history at %s, using %s", key, revision, fallback_revision)
        revision = fallback_revision
        marker = git.last_modified(revision, key, config.marker_format)
    if not marker:
        raise UnresolvedReferenceError(revision, key)
    location = git.root / key / config.descriptor_filename
    return module_from_descriptor(location, parse_descriptor(location), marker)


def load_snapshot(
    git: GitRepository,
    revision: str | None,
    config: ModChangesConfig,
) -> Snapshot:
    """Load every module existing at ``revision``.

    Args:
        git: Repository rooted at the root descriptor directory
        revision: Revision to inspect; ``None`` means "no baseline" and
            yields an empty snapshot without touching git
        config: Descriptor name, marker format and directory filters

    Returns:
        Frozen set of modules, each tagged with its last-modification marker
        at ``revision``.
    """
    if revision is None:
        return EMPTY_SNAPSHOT

    keys = find_descriptor_dirs(git, revision, config)
    logger.debug("%d module directories at %s", len(keys), revision)
    return frozenset(resolve_module(git, revision, key, config) for key in keys)


__all__ = ["find_descriptor_dirs", "load_snapshot", "resolve_module"]

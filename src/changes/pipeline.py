"""End-to-end computation of the modules affected between two revisions."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

from changes.assemble import assemble_result
from changes.changeset import compute_change_set
from changes.model import EMPTY_SNAPSHOT, Snapshot
from changes.snapshot import load_snapshot, resolve_module
from errors import PreconditionError
from graph.closure import Direction, expand_closure, select_direction
from graph.registry import HEAD, build_registry
from logs import get_logger
from settings.config import load_config
from timing import StepTimer
from utils import to_repo_key
from vcs.git import GitRepository, checked_out_revision

if TYPE_CHECKING:
    from changes.model import Module
    from graph.registry import RegistryEntry
    from settings.config import ModChangesConfig

logger = get_logger("changes.pipeline")


@dataclass(frozen=True)
class RunOptions:
    root_descriptor: Path
    baseline: str | None = None
    target: str | None = None
    include_dependents: bool = False
    include_dependencies: bool = False
    use_checkout: bool = False
    time_execution: bool = False


def _check_root_descriptor(root_descriptor: Path) -> None:
    if not root_descriptor.is_file() or not os.access(root_descriptor, os.R_OK):
        msg = f"root descriptor {root_descriptor} does not exist or is not readable"
        raise PreconditionError(msg)


def _load_snapshots(
    git: GitRepository,
    options: RunOptions,
    config: ModChangesConfig,
    timer: StepTimer,
) -> tuple[Snapshot, Snapshot]:
    target_revision = options.target or HEAD

    if not options.use_checkout:
        baseline = load_snapshot(git, options.baseline, config)
        timer.mark("computing modules of old commit")
        target = load_snapshot(git, target_revision, config)
        timer.mark("computing modules of new commit")
        return baseline, target

    with checked_out_revision(git) as session:
        baseline = EMPTY_SNAPSHOT
        if options.baseline is not None:
            session.switch(options.baseline)
            timer.mark("checkout of old commit")
            baseline = load_snapshot(git, options.baseline, config)
        timer.mark("computing modules of old commit")

        if options.target is not None:
            session.switch(options.target)
            timer.mark("checkout of new commit")
        target = load_snapshot(git, target_revision, config)
        timer.mark("computing modules of new commit")
    timer.mark("checkout of previous commit")
    return baseline, target


def _expand(
    git: GitRepository,
    options: RunOptions,
    config: ModChangesConfig,
    changed: Snapshot,
    direction: Direction,
    timer: StepTimer,
) -> Snapshot:
    registry = build_registry(git, options.root_descriptor, config)
    timer.mark("finding poms")

    target_revision = options.target or HEAD

    def _resolve(entry: RegistryEntry) -> Module:
        key = to_repo_key(entry.directory, git.root)
        return resolve_module(git, target_revision, key, config, fallback_revision=HEAD)

    expanded = expand_closure(changed, direction, registry, _resolve)
    if direction is Direction.TOWARD_DEPENDENCIES:
        timer.mark("dependencies queue completion")
    else:
        timer.mark("dependents queue completion")
    return expanded


def find_changed_modules(
    options: RunOptions,
    *,
    config: ModChangesConfig | None = None,
    git: GitRepository | None = None,
) -> list[str]:
    """Compute the identities of modules changed between two revisions.

    Args:
        options: What to compare and how far to expand the result
        config: Optional configuration; loaded from the root descriptor's
            directory when omitted
        git: Optional repository facade, mainly for tests

    Returns:
        Sorted identities of the real (artifact-bearing) modules affected.

    Raises:
        PreconditionError: If the root descriptor is unusable or not inside a
            git work tree.
        ExternalCommandFailure: If any git query fails or times out.
        DescriptorParseFailure: If any descriptor is malformed.
        UnresolvedReferenceError: If a listed directory has no history at the
            requested revision.
    """
    timer = StepTimer(options.time_execution)

    root_descriptor = options.root_descriptor.resolve()
    options = replace(options, root_descriptor=root_descriptor)
    _check_root_descriptor(root_descriptor)
    root_dir = root_descriptor.parent

    if config is None:
        config = load_config(root_dir)
    if git is None:
        git = GitRepository(
            root_dir,
            timeout_seconds=config.command_timeout_seconds,
            executable=config.git_executable,
        )

    if not git.is_inside_work_tree():
        msg = f"the given directory {root_dir} is not part of a git repository"
        raise PreconditionError(msg)
    if options.use_checkout and options.target is None:
        # HEAD moves while revisions are checked out; pin the default target.
        options = replace(options, target=git.head_commit())
    timer.mark("setup")

    baseline, target = _load_snapshots(git, options, config, timer)

    changed = compute_change_set(target, baseline)
    timer.mark("cross-intersecting result sets")
    logger.debug("%d module(s) changed before expansion", len(changed))

    direction = select_direction(options.include_dependencies, options.include_dependents)
    if direction is not None:
        changed = _expand(git, options, config, changed, direction, timer)

    result = assemble_result(changed)
    timer.mark("computation of final result")
    return result


__all__ = ["RunOptions", "find_changed_modules"]

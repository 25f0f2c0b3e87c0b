"""Difference of two snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from changes.model import Snapshot


def compute_change_set(target: Snapshot, baseline: Snapshot) -> Snapshot:
    """Return the modules of ``target`` that do not appear in ``baseline``.

    Membership compares identity and last-modification marker together, so a
    module whose directory was touched between the two revisions stays in the
    result even though its identity is unchanged. An empty baseline makes
    every target module changed.
    """
    return frozenset(module for module in target if module not in baseline)


__all__ = ["compute_change_set"]

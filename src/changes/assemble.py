"""Project a module set to the identities presented to the user."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from changes.model import Module


def assemble_result(modules: Iterable[Module]) -> list[str]:
    """Drop placeholder modules and return the remaining identities.

    Modules without a non-blank artifact id are valid graph nodes but never
    part of the output. The result has set semantics; it is sorted only to
    keep output deterministic.
    """
    return sorted({module.identity for module in modules if module.is_artifact})


__all__ = ["assemble_result"]

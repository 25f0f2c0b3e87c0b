"""Module identity model shared by snapshots, diffing and closure."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from descriptor.pom import Descriptor


@dataclass(frozen=True)
class Module:
    """One buildable unit as it exists at a specific revision.

    Equality and hashing use only ``(identity, last_modified)``: two modules
    are the same exactly when their identity matches and their directory was
    last touched by the same change.
    """

    identity: str
    last_modified: str
    location: Path = field(compare=False)
    descriptor: Descriptor = field(compare=False, repr=False)

    @property
    def directory(self) -> Path:
        return self.location.parent

    @property
    def declared_dependencies(self) -> list[str]:
        return self.descriptor.declared_dependencies

    @property
    def is_artifact(self) -> bool:
        return self.descriptor.is_artifact


Snapshot = frozenset[Module]

EMPTY_SNAPSHOT: Snapshot = frozenset()


def module_from_descriptor(
    location: Path,
    descriptor: Descriptor,
    last_modified: str,
) -> Module:
    return Module(
        identity=descriptor.identity,
        last_modified=last_modified,
        location=location,
        descriptor=descriptor,
    )


__all__ = ["EMPTY_SNAPSHOT", "Module", "Snapshot", "module_from_descriptor"]

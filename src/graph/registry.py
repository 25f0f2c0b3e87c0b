"""Identity -> descriptor map of the project at the head of history."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from changes.snapshot import find_descriptor_dirs
from descriptor.pom import Descriptor, parse_descriptor
from graph.algos import build_dependency_graph, find_cycles, reverse_graph
from logs import get_logger
from utils import to_repo_key

if TYPE_CHECKING:
    from settings.config import ModChangesConfig
    from vcs.git import GitRepository

logger = get_logger("graph.registry")

HEAD = "HEAD"


@dataclass(frozen=True)
class RegistryEntry:
    identity: str
    location: Path
    descriptor: Descriptor = field(compare=False, repr=False)

    @property
    def directory(self) -> Path:
        return self.location.parent


class Registry:
    """Edge set used for closure traversal.

    Edges are declared identity references, resolved against the entries
    present here. References to identities outside the project simply have
    no entry. The registry reflects the current head regardless of which
    revisions are being compared, so edges can differ from the dependency
    structure that existed at those revisions.
    """

    def __init__(self, entries: dict[str, RegistryEntry]) -> None:
        self.entries = dict(entries)
        self.graph = build_dependency_graph(
            {identity: entry.descriptor.declared_dependencies for identity, entry in self.entries.items()}
        )
        self._dependents = reverse_graph(self.graph)

    def __len__(self) -> int:
        return len(self.entries)

    def dependencies_of(self, declared_dependencies: list[str]) -> list[RegistryEntry]:
        """Entries whose identity appears in ``declared_dependencies``."""
        seen: set[str] = set()
        found: list[RegistryEntry] = []
        for identity in declared_dependencies:
            entry = self.entries.get(identity)
            if entry is not None and identity not in seen:
                seen.add(identity)
                found.append(entry)
        return found

    def dependents_of(self, identity: str) -> list[RegistryEntry]:
        """Entries that declare ``identity`` among their dependencies."""
        return [self.entries[node] for node in sorted(self._dependents.get(identity, set()))]

    def cycles(self) -> list[list[str]]:
        return find_cycles(self.graph)


def build_registry(
    git: GitRepository,
    root_descriptor: Path,
    config: ModChangesConfig,
) -> Registry:
    """Build the registry from the tracked tree at ``HEAD``.

    The root descriptor is always registered. Every other discoverable
    descriptor is registered only if it carries a non-blank artifact id.

    Raises:
        DescriptorParseFailure: If any discovered descriptor is malformed.
    """
    entries: dict[str, RegistryEntry] = {}

    def _register(location: Path, descriptor: Descriptor) -> None:
        identity = descriptor.identity
        if identity in entries:
            logger.debug(
                "identity %s declared by %s and %s; keeping the latter",
                identity,
                to_repo_key(entries[identity].location, git.root),
                to_repo_key(location, git.root),
            )
        entries[identity] = RegistryEntry(identity, location, descriptor)

    _register(root_descriptor, parse_descriptor(root_descriptor))

    for key in find_descriptor_dirs(git, HEAD, config):
        location = git.root / key / config.descriptor_filename
        descriptor = parse_descriptor(location)
        if descriptor.is_artifact:
            _register(location, descriptor)

    registry = Registry(entries)
    logger.debug("registry holds %d descriptors", len(registry))
    for cycle in registry.cycles():
        logger.warning("dependency cycle between modules: %s", ", ".join(cycle))
    return registry


__all__ = ["HEAD", "Registry", "RegistryEntry", "build_registry"]

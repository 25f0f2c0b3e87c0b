"""Maven ``pom.xml`` descriptor parsing.

Only the coordinates needed to build the module graph are read: the
project's own group/artifact ids, its parent linkage (for group id
inheritance) and the direct ``<dependencies>``.
Tags are matched by local name so both namespaced and plain POMs work.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from errors import DescriptorParseFailure

if TYPE_CHECKING:
    from pathlib import Path

ID_SEPARATOR = "::"

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def build_identity(group_id: str | None, artifact_id: str | None) -> str:
    """Build the canonical ``group::artifact`` identity string.

    A missing artifact id yields just the group id; a missing group id is
    rendered as an empty string so the identity stays unambiguous.
    """
    group = group_id or ""
    if artifact_id:
        return f"{group}{ID_SEPARATOR}{artifact_id}"
    return group


class ParentRef(BaseModel):
    """Coordinates of the ``<parent>`` a descriptor inherits from."""

    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None


class DependencyRef(BaseModel):
    """One direct ``<dependency>`` entry."""

    group_id: str | None = None
    artifact_id: str | None = None

    @property
    def identity(self) -> str:
        return build_identity(self.group_id, self.artifact_id)


class Descriptor(BaseModel):
    """Graph-relevant content of one build descriptor."""

    group_id: str | None = None
    artifact_id: str | None = None
    parent: ParentRef | None = None
    dependencies: list[DependencyRef] = Field(default_factory=list)

    @property
    def effective_group_id(self) -> str | None:
        if self.group_id:
            return self.group_id
        if self.parent is not None:
            return self.parent.group_id
        return None

    @property
    def identity(self) -> str:
        return build_identity(self.effective_group_id, self.artifact_id)

    @property
    def is_artifact(self) -> bool:
        return bool(self.artifact_id and self.artifact_id.strip())

    @property
    def declared_dependencies(self) -> list[str]:
        return [dependency.identity for dependency in self.dependencies]


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> ET.Element | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _children(element: ET.Element | None, name: str) -> list[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local_name(child.tag) == name]


def _text(element: ET.Element | None, name: str) -> str | None:
    if element is None:
        return None
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    value = child.text.strip()
    return value or None


def _interpolation_context(
    group_id: str | None,
    artifact_id: str | None,
    version: str | None,
    parent: ParentRef | None,
    properties: dict[str, str],
) -> dict[str, str]:
    context = dict(properties)
    coordinates = {
        "groupId": group_id or (parent.group_id if parent else None),
        "artifactId": artifact_id,
        "version": version or (parent.version if parent else None),
    }
    for key, value in coordinates.items():
        if value is None:
            continue
        context[f"project.{key}"] = value
        context[f"pom.{key}"] = value
        context[key] = value
    if parent is not None:
        for key, value in (
            ("groupId", parent.group_id),
            ("artifactId", parent.artifact_id),
            ("version", parent.version),
        ):
            if value is not None:
                context[f"project.parent.{key}"] = value
                context[f"parent.{key}"] = value
    return context


def _interpolate(value: str | None, context: dict[str, str]) -> str | None:
    if value is None or "${" not in value:
        return value
    return _PLACEHOLDER.sub(lambda m: context.get(m.group(1), m.group(0)), value)


def parse_descriptor(path: Path) -> Descriptor:
    """Parse a ``pom.xml`` file into a :class:`Descriptor`.

    Raises:
        DescriptorParseFailure: If the file cannot be read, is not well-formed
            XML, or its root element is not ``<project>``.
    """
    try:
        tree = ET.parse(path)
    except ET.ParseError as exc:
        raise DescriptorParseFailure(path, f"malformed XML: {exc}") from exc
    except OSError as exc:
        raise DescriptorParseFailure(path, str(exc)) from exc

    project = tree.getroot()
    if _local_name(project.tag) != "project":
        msg = f"unexpected root element <{_local_name(project.tag)}>"
        raise DescriptorParseFailure(path, msg)

    parent_element = _child(project, "parent")
    parent = None
    if parent_element is not None:
        parent = ParentRef(
            group_id=_text(parent_element, "groupId"),
            artifact_id=_text(parent_element, "artifactId"),
            version=_text(parent_element, "version"),
        )

    properties: dict[str, str] = {}
    properties_element = _child(project, "properties")
    if properties_element is not None:
        for prop in properties_element:
            name = _local_name(prop.tag)
            if name:
                properties[name] = (prop.text or "").strip()

    group_id = _text(project, "groupId")
    artifact_id = _text(project, "artifactId")
    version = _text(project, "version")
    context = _interpolation_context(group_id, artifact_id, version, parent, properties)

    dependencies = [
        DependencyRef(
            group_id=_interpolate(_text(dependency, "groupId"), context),
            artifact_id=_interpolate(_text(dependency, "artifactId"), context),
        )
        for dependency in _children(_child(project, "dependencies"), "dependency")
    ]

    return Descriptor(
        group_id=group_id,
        artifact_id=artifact_id,
        parent=parent,
        dependencies=dependencies,
    )


__all__ = [
    "ID_SEPARATOR",
    "DependencyRef",
    "Descriptor",
    "ParentRef",
    "build_identity",
    "parse_descriptor",
]

"""Build descriptor models and parsing."""

from descriptor.pom import (
    DependencyRef,
    Descriptor,
    ParentRef,
    build_identity,
    parse_descriptor,
)

__all__ = [
    "DependencyRef",
    "Descriptor",
    "ParentRef",
    "build_identity",
    "parse_descriptor",
]

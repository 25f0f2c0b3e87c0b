"""Module dependency graph: registry, algorithms and closure."""

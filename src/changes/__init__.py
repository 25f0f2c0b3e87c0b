"""Change detection between two revisions of a multi-module project."""

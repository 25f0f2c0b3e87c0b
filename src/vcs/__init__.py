"""Version-control access for modchanges."""

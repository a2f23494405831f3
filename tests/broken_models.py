"""A module whose import fails with something other than ImportError."""

raise RuntimeError("database settings missing")

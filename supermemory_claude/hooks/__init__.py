"""Claude Code hook entry points."""

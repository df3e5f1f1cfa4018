"""Persistent Supermemory recall for Claude Code sessions."""

__version__ = "0.3.0"

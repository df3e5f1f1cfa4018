"""Exception types shared across supermemory-claude."""


class SupermemoryClaudeError(Exception):
    """Base class for errors raised by this package."""


class WatermarkError(SupermemoryClaudeError):
    """Capture watermark could not be read or persisted (I/O level)."""


class MissingApiKeyError(SupermemoryClaudeError):
    """No Supermemory API key could be resolved."""

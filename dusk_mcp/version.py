"""Version information for dusk-mcp."""

__version__ = "1.0.0"

"""Build a single markdown context document from a project directory."""

__version__ = "0.3.0"

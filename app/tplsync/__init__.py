"""tplsync - keep a template directory and its flat database in sync."""

__version__ = "0.1.0"

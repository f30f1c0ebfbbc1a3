"""Client-side task list kept in sync with a REST backend."""

__version__ = "0.1.0"

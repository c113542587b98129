"""Shadow Escape enemy navigation and pursuit AI."""

__version__ = "0.1.0"

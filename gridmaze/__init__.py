"""Grid maze generation and weighted path solving."""

__version__ = "0.1.0"

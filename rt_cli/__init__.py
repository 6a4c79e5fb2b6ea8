"""Running workout intent classifier."""

__version__ = "0.1.0"

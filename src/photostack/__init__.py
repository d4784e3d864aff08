"""Photo Stack - criteria evaluation support for file stacking."""

__version__ = "0.1.0"

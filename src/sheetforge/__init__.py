"""Character sheet modifier and formula engine."""

__version__ = "0.1.0"

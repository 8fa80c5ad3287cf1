"""Comment coverage lint engine for control-flow constructs."""

__version__ = "0.1.0"

"""Real-time multi-user chat relay with expiring messages and translation."""

__version__ = "0.1.0"

"""Guest Q&A check-in record store."""

__version__ = "1.0.0"

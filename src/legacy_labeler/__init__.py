"""Document inventory and review-state service for scanned legacy documents."""

__version__ = "1.0.0"

"""VisualMemory: dynamic priority ranking for personal tasks."""

__version__ = "0.1.0"

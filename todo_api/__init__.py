"""Task List API - cache-aside task list service."""

__version__ = "1.0.0"

"""Progress reporting services."""

from .progress import ConsoleProgress, NullProgress

__all__ = ["ConsoleProgress", "NullProgress"]

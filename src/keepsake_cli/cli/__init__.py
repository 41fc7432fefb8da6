"""CLI helpers exposed for other modules."""

from .helpers import console, run_or_exit

__all__ = ["console", "run_or_exit"]

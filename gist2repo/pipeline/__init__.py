"""Gist-to-repository sync pipeline."""

from .runner import main, run

__all__ = ["main", "run"]

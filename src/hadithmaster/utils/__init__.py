"""Shared CLI console and logging setup."""

from .console import console
from .logging import setup_logging

__all__ = ["console", "setup_logging"]

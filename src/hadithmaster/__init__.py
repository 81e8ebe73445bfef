"""Hadith Master - daily hadith service."""

__version__ = "0.1.0"

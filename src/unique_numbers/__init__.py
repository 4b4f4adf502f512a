"""Unique random number issuing service."""

__version__ = "1.0.0"

"""Sliding window request rate limiting for Synthalyst services."""

__version__ = "0.1.0"

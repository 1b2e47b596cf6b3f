"""Bubble's Cafe session and CSRF protection service."""

__version__ = "0.1.0"

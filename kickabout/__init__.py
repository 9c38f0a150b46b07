"""Kickabout: attendance and capacity service for a weekly pickup game."""

__version__ = "1.0.0"

"""Needledrop - social music logging backend."""
__version__ = "0.4.0"

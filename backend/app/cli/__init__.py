"""Needledrop command line interface."""

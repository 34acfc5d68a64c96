"""Shared domain package for the rental marketplace (vehicles and stays)."""

__version__ = "0.1.0"

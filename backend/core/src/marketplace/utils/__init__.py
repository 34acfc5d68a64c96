"""Utility helpers shared across services and the API."""

"""REST API for the rental marketplace booking engine."""

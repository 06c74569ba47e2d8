"""Postboard: posts, comments and users API with JWT session management."""

__version__ = "0.1.0"

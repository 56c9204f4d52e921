"""Houser: users and houses CRUD API with JWT authentication."""

__version__ = "0.1.0"

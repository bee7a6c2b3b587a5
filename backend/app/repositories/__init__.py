"""Persistence interfaces and their SQLAlchemy implementations."""

"""Explicit request payload validation."""

"""Logging and request-id helpers."""

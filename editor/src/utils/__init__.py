"""Shared helpers: coordinate transforms and error reporting."""

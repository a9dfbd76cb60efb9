"""Ambient runtime concerns: configuration and logging."""

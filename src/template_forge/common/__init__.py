"""Shared helpers used by both the core models and the engine."""

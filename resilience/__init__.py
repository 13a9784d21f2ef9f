"""Checkpoint building blocks: registration, view holders and hooks, tracing, JSON and filesystem helpers."""

__version__ = "0.1.0"

__all__ = [
    "jsonvalue",
    "jsonparse",
    "timer",
    "filesystem",
    "directory",
    "trace",
    "external_io",
    "viewholder",
    "view_hooks",
    "registration",
    "registration_views",
]
"""Timing, edit rates, flow and grain headers, wait/wake and shared-memory segments for media flows."""

__version__ = "0.7.1"

__all__ = [
    "dataformat",
    "flowinfo",
    "grain",
    "rational",
    "sharedmem",
    "status",
    "sync",
    "timebase",
    "timing",
]
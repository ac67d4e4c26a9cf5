"""Streaming schemas."""

from enum import Enum


class StreamState(str, Enum):
    """Lifecycle of a category stream.

    RUNNING moves to CANCELLED, EXHAUSTED or FAILED, and each of those
    always ends in CLOSED.
    """
    RUNNING = "running"
    CANCELLED = "cancelled"
    EXHAUSTED = "exhausted"
    FAILED = "failed"
    CLOSED = "closed"

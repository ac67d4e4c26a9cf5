"""Paced category streaming."""

from .category_stream import CategoryStream, CategoryStreamPump, format_sse_event

__all__ = ["CategoryStream", "CategoryStreamPump", "format_sse_event"]

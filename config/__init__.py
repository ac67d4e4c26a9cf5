"""Configuration for the Movie Recommendation Assistant."""

from .settings import Settings

__all__ = ["Settings"]

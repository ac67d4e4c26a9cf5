"""Catalog item schemas."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """A movie as fetched from the catalog. Immutable for a recommendation pass."""
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    description: str = ""
    category: str
    release_year: int
    rating: float = Field(..., ge=0.0, le=10.0)
    minimum_age: int = Field(0, ge=0, description="Minimum viewer age")
    director: Optional[str] = None
    cast: list[str] = Field(default_factory=list)
    duration_minutes: int = Field(0, ge=0)

"""Age filtering and prompt rendering for the catalog."""

from typing import Sequence

from schemas.catalog import Item


def filter_by_age(items: Sequence[Item], user_age: int) -> list[Item]:
    """
    Keep the items a viewer of the given age may watch.

    Args:
        items: Full catalog
        user_age: Requester age

    Returns:
        Items with minimum_age <= user_age, in catalog order
    """
    if user_age < 0:
        raise ValueError(f"User age must be non-negative, got {user_age}")
    return [item for item in items if item.minimum_age <= user_age]


def build_catalog_description(items: Sequence[Item], user_age: int) -> str:
    """Render the filtered catalog as the text evaluators read."""
    lines = [f"User Age: {user_age}", "Available Movies:"]
    for item in items:
        lines.append(
            f"ID:{item.id} | {item.title} | Category:{item.category} | "
            f"Year:{item.release_year} | Rating:{item.rating}/10 | MinAge:{item.minimum_age}+"
        )
    return "\n".join(lines) + "\n"

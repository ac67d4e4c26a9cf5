"""Human-readable explanations for recommendation lists."""

from typing import Sequence

from schemas.catalog import Item

DEFAULT_HEADER = "Multi-agent concurrent recommendations:"
FALLBACK_HEADER = "Fallback recommendations (evaluators unavailable):"


def category_marker(category: str) -> str:
    """Pick the decorative marker for a category."""
    category_lower = category.lower()
    if "romance" in category_lower:
        return "🌹"
    if "action" in category_lower:
        return "💥"
    return "🎬"


def format_reasoning(items: Sequence[Item], header: str = DEFAULT_HEADER) -> str:
    """
    Explain a recommendation list, one line per movie.

    Args:
        items: Recommended movies in list order
        header: First line of the explanation

    Returns:
        Multi-line reasoning text
    """
    lines = [header]
    for item in items:
        lines.append(
            f"{category_marker(item.category)} {item.title} ({item.category}) - "
            f"Rating: {item.rating}/10 - Year: {item.release_year}"
        )
    return "\n".join(lines) + "\n"

"""Specialized evaluator roles for movie recommendations."""

from schemas.recommendation import EvaluatorKind, EvaluatorRole

ROMANCE_EXPERT = EvaluatorRole(
    kind=EvaluatorKind.ROMANCE,
    name="RomanceExpert",
    instructions=(
        "You are a romance movie specialist. Analyze the catalog and recommend ONE "
        "romance movie suitable for the user's age. Focus on romantic themes, love "
        "stories, or strong romantic elements. Respond with ONLY the movie ID number."
    ),
    temperature=0.4,
    max_tokens=4096,
)

ACTION_HERO_EXPERT = EvaluatorRole(
    kind=EvaluatorKind.ACTION_HERO,
    name="ActionHeroExpert",
    instructions=(
        "You are an action and superhero movie specialist. Analyze the catalog and "
        "recommend ONE action or superhero movie. Look for movies with Action category "
        "or superhero themes. Respond with ONLY the movie ID number."
    ),
)

CLASSIC_CINEMA_EXPERT = EvaluatorRole(
    kind=EvaluatorKind.CLASSIC,
    name="ClassicCinemaExpert",
    instructions=(
        "You are a classic cinema specialist. Analyze the catalog and recommend ONE "
        "classic movie (released before 2010) with high ratings. Focus on timeless "
        "films. Respond with ONLY the movie ID number."
    ),
)

DEFAULT_EVALUATOR_ROLES = (CLASSIC_CINEMA_EXPERT, ROMANCE_EXPERT, ACTION_HERO_EXPERT)


def build_evaluator_prompt(catalog_text: str) -> str:
    """Frame the catalog description as the shared evaluator request."""
    return f"Suggest a movie to watch based on the catalog:\n{catalog_text}"

"""Tests for recommendation reasoning text."""

from agents.reasoning import format_reasoning, category_marker, DEFAULT_HEADER, FALLBACK_HEADER
from schemas.catalog import Item


def _movie(id, title, category, rating=8.0, year=2000):
    return Item(id=id, title=title, category=category, release_year=year, rating=rating)


class TestFormatReasoning:
    """Test reasoning formatting."""

    def test_one_line_per_movie_after_header(self):
        movies = [
            _movie(1, "The Notebook", "Romance/Drama", 7.8, 2004),
            _movie(2, "The Dark Knight", "Action", 9.0, 2008),
            _movie(3, "Toy Story", "Animation", 8.3, 1995),
        ]

        lines = format_reasoning(movies).strip().splitlines()

        assert lines[0] == DEFAULT_HEADER
        assert lines[1] == "🌹 The Notebook (Romance/Drama) - Rating: 7.8/10 - Year: 2004"
        assert lines[2] == "💥 The Dark Knight (Action) - Rating: 9.0/10 - Year: 2008"
        assert lines[3] == "🎬 Toy Story (Animation) - Rating: 8.3/10 - Year: 1995"

    def test_custom_header(self):
        text = format_reasoning([_movie(3, "Toy Story", "Animation")], header=FALLBACK_HEADER)

        assert text.startswith(FALLBACK_HEADER)

    def test_marker_is_case_insensitive(self):
        assert category_marker("ROMANCE") == "🌹"
        assert category_marker("action-comedy") == "💥"
        assert category_marker("Documentary") == "🎬"

"""Catalog API provider backed by a remote movie catalog service."""

import logging
from typing import Optional
import requests
from pydantic import ValidationError

from schemas.catalog import Item
from .catalog_provider import CatalogProvider, CatalogFetchError

logger = logging.getLogger(__name__)


class CatalogAPIProvider(CatalogProvider):
    """
    Remote catalog provider.

    Reads the full movie list from ``<base_url>/movies``. Unlike a search
    provider, a failed fetch is an error for the caller to handle: the
    provider records it, marks itself unavailable and raises
    ``CatalogFetchError``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 10,
        auth_token: Optional[str] = None
    ):
        """
        Initialize Catalog API provider.

        Args:
            base_url: Base URL for the catalog API (e.g., https://movies.example.com/api)
            timeout: Request timeout in seconds (default: 10)
            auth_token: Optional authentication token
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.auth_token = auth_token
        self._is_available = True
        self._last_error: Optional[str] = None

    def _get_headers(self) -> dict:
        """Build request headers."""
        headers = {
            "Accept": "application/json",
            "User-Agent": "Movie-Recommendation-Assistant/1.0"
        }
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    def _handle_error(self, error: Exception, context: str) -> CatalogFetchError:
        """
        Record an API error and build the exception to raise.

        Args:
            error: Exception that occurred
            context: Context string for logging
        """
        self._is_available = False
        self._last_error = str(error)
        logger.warning(f"Catalog API error during {context}: {error}")
        return CatalogFetchError(f"Catalog API error during {context}: {error}")

    def fetch_all(self) -> list[Item]:
        """
        Fetch every movie from the API.

        Returns:
            Parsed catalog items; malformed entries are skipped

        Raises:
            CatalogFetchError: On timeouts, connection errors or non-200 responses
        """
        url = f"{self.base_url}/movies"
        try:
            response = requests.get(
                url,
                headers=self._get_headers(),
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            raise self._handle_error(
                Exception(f"Request timeout after {self.timeout}s"),
                "fetch_all"
            ) from e
        except requests.exceptions.RequestException as e:
            raise self._handle_error(e, "fetch_all") from e

        # Handle authentication errors
        if response.status_code in (401, 403):
            raise self._handle_error(
                Exception(f"Authentication failed: {response.status_code}"),
                "fetch_all"
            )

        if response.status_code != 200:
            raise self._handle_error(
                Exception(f"API returned status {response.status_code}: {response.text}"),
                "fetch_all"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise self._handle_error(e, "fetch_all") from e

        # Expected format: {"results": [...]}, {"movies": [...]} or a bare array
        if isinstance(data, dict):
            records = data.get("results") or data.get("movies") or data.get("data") or []
        elif isinstance(data, list):
            records = data
        else:
            raise self._handle_error(
                Exception(f"Unexpected API response format: {type(data).__name__}"),
                "fetch_all"
            )

        items = []
        for record in records:
            item = self._parse_movie(record)
            if item:
                items.append(item)

        self._is_available = True
        self._last_error = None
        return items

    def _parse_movie(self, record: dict) -> Optional[Item]:
        """
        Parse an API record to an Item.

        Accepts both snake_case and camelCase field names.

        Args:
            record: API response item (dict)

        Returns:
            Item if parsing successful, None otherwise
        """
        def pick(*names, default=None):
            for name in names:
                if record.get(name) is not None:
                    return record[name]
            return default

        try:
            return Item(
                id=pick("id", "movie_id", "movieId"),
                title=pick("title", "name"),
                description=pick("description", "summary", default=""),
                category=pick("category", "genre"),
                release_year=pick("release_year", "releaseYear", "year"),
                rating=pick("rating", "score"),
                minimum_age=pick("minimum_age", "minimumAge", "min_age", default=0),
                director=pick("director"),
                cast=pick("cast", default=[]),
                duration_minutes=pick("duration_minutes", "durationMinutes", "runtime", default=0),
            )
        except (ValidationError, AttributeError) as e:
            logger.warning(f"Failed to parse catalog movie: {e}")
            return None

    def is_available(self) -> bool:
        """Check if the last API call succeeded."""
        return self._is_available

    def get_last_error(self) -> Optional[str]:
        """Get the last error message."""
        return self._last_error

"""Catalog provider factory."""

from enum import Enum

from config.settings import Settings
from .catalog_provider import CatalogProvider, InMemoryCatalogProvider
from .csv_catalog_provider import CSVCatalogProvider
from .catalog_api_provider import CatalogAPIProvider


class CatalogSource(str, Enum):
    """Supported catalog sources."""
    MEMORY = "memory"
    CSV = "csv"
    API = "api"


def create_catalog_provider(settings: Settings) -> CatalogProvider:
    """
    Create the catalog provider selected in settings.

    Raises:
        ValueError: If the source is unknown or lacks required settings
    """
    try:
        source = CatalogSource(settings.catalog_source)
    except ValueError:
        raise ValueError(f"Unsupported catalog source: {settings.catalog_source}") from None

    if source == CatalogSource.CSV:
        return CSVCatalogProvider(csv_path=settings.catalog_csv_path)
    elif source == CatalogSource.API:
        if not settings.catalog_api_url:
            raise ValueError("catalog_api_url is required for the api catalog source")
        return CatalogAPIProvider(
            base_url=settings.catalog_api_url,
            timeout=settings.catalog_api_timeout,
            auth_token=settings.catalog_api_token,
        )
    return InMemoryCatalogProvider()

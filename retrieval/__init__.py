"""Catalog access layer."""

from .catalog_provider import CatalogProvider, CatalogFetchError, InMemoryCatalogProvider
from .catalog_filter import filter_by_age, build_catalog_description
from .csv_catalog_provider import CSVCatalogProvider
from .catalog_api_provider import CatalogAPIProvider
from .factory import CatalogSource, create_catalog_provider

__all__ = [
    "CatalogProvider",
    "CatalogFetchError",
    "InMemoryCatalogProvider",
    "filter_by_age",
    "build_catalog_description",
    "CSVCatalogProvider",
    "CatalogAPIProvider",
    "CatalogSource",
    "create_catalog_provider",
]

"""CSV-backed catalog provider with parsing and cleaning logic."""

import logging
from pathlib import Path
from typing import Optional, Any

import pandas as pd
import yaml
from pydantic import ValidationError

from schemas.catalog import Item
from .catalog_provider import CatalogProvider, CatalogFetchError

logger = logging.getLogger(__name__)


class CSVCatalogProvider(CatalogProvider):
    """Load the movie catalog from a CSV file."""

    NULL_VALUES = ["Null", "null", "NULL", "", "nan", "NaN", "NAN", "N/A"]

    def __init__(self, csv_path: str, columns_config_path: Optional[str] = None):
        """
        Initialize CSV provider.

        Args:
            csv_path: Path to the catalog CSV file
            columns_config_path: Path to columns.yaml config
        """
        self.csv_path = csv_path

        if columns_config_path is None:
            # Default to config/columns.yaml
            base_path = Path(__file__).parent.parent
            columns_config_path = base_path / "config" / "columns.yaml"

        with open(columns_config_path, 'r') as f:
            self.column_mapping = yaml.safe_load(f).get("movie", {})

    def fetch_all(self) -> list[Item]:
        """Read and parse every row of the CSV file."""
        df = self.load_dataframe()

        items = []
        for row_number, row in enumerate(df.to_dict(orient="records"), start=1):
            try:
                items.append(self._row_to_item(row))
            except (ValidationError, ValueError, TypeError) as e:
                logger.warning(f"Skipping CSV row {row_number} in {self.csv_path}: {e}")

        logger.info(f"Loaded {len(items)} movies from {self.csv_path}")
        return items

    def load_dataframe(self) -> pd.DataFrame:
        """
        Load CSV file with logical column names.

        Returns:
            DataFrame whose columns are the logical field names

        Raises:
            CatalogFetchError: If the file cannot be read or lacks required columns
        """
        try:
            df = pd.read_csv(self.csv_path, dtype=str, keep_default_na=False)
        except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise CatalogFetchError(f"Could not read catalog CSV {self.csv_path}: {e}") from e

        df = self._rename_columns(df)

        missing = [
            name for name in ("id", "title", "category", "release_year", "rating")
            if name not in df.columns
        ]
        if missing:
            raise CatalogFetchError(f"Catalog CSV {self.csv_path} is missing columns: {missing}")

        return df

    def _rename_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        """Rename CSV headers to logical field names using the column map."""
        renames = {}
        for logical_name, candidates in self.column_mapping.items():
            if isinstance(candidates, str):
                candidates = [candidates]
            for header in candidates:
                if header in df.columns:
                    renames[header] = logical_name
                    break
        return df.rename(columns=renames)[list(renames.values())]

    def _row_to_item(self, row: dict) -> Item:
        # Normalize nulls
        row = {key: (None if value in self.NULL_VALUES else value) for key, value in row.items()}
        return Item(
            id=int(row["id"]),
            title=row["title"],
            description=row.get("description") or "",
            category=row["category"],
            release_year=int(row["release_year"]),
            rating=float(row["rating"]),
            minimum_age=int(row.get("minimum_age") or 0),
            director=row.get("director"),
            cast=self._parse_array(row.get("cast")),
            duration_minutes=int(row.get("duration_minutes") or 0),
        )

    def _parse_array(self, value: Any) -> list[str]:
        """
        Parse a comma-separated field.

        Rules:
        - Split by comma
        - Strip whitespace
        - Drop empty or "null"
        - Deduplicate while preserving order
        """
        if value is None:
            return []

        if isinstance(value, list):
            items = value
        elif isinstance(value, str):
            items = value.split(',')
        else:
            return []

        cleaned = []
        seen = set()
        for item in items:
            item = str(item).strip()
            if not item or item.lower() in ['null', 'nan']:
                continue
            if item not in seen:
                cleaned.append(item)
                seen.add(item)

        return cleaned

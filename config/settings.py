"""Application settings."""

import os
from typing import Optional
from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Application configuration settings."""

    # Catalog source: "memory", "csv" or "api"
    catalog_source: str = "memory"
    catalog_csv_path: str = "data/movies.csv"
    catalog_api_url: Optional[str] = None
    catalog_api_token: Optional[str] = None
    catalog_api_timeout: int = 10

    # LLM Provider settings
    llm_provider: str = "openai"  # "openai" or "anthropic"
    llm_model: Optional[str] = None

    # API Keys
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    # Recommendation settings
    max_recommendations: int = Field(3, ge=1, le=3)
    evaluator_timeout_seconds: float = Field(30.0, gt=0)

    # Streaming settings
    stream_delay_seconds: float = Field(0.1, ge=0)

    # Logging
    verbose: bool = False

    def __init__(self, **data):
        # Auto-load secrets and endpoints from environment if not provided
        env_fallbacks = {
            "openai_api_key": "OPENAI_API_KEY",
            "anthropic_api_key": "ANTHROPIC_API_KEY",
            "catalog_api_url": "CATALOG_API_URL",
            "catalog_api_token": "CATALOG_API_TOKEN",
        }
        for field_name, env_var in env_fallbacks.items():
            if data.get(field_name) is None:
                data[field_name] = os.environ.get(env_var)

        super().__init__(**data)

    def get_llm_api_key(self) -> Optional[str]:
        """Get the API key for the configured LLM provider."""
        if self.llm_provider == "openai":
            return self.openai_api_key
        elif self.llm_provider == "anthropic":
            return self.anthropic_api_key
        return None

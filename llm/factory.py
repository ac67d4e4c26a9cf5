"""LLM client factory."""

from enum import Enum
from typing import Optional, Union

from .base_client import BaseLLMClient
from .openai_client import OpenAIClient
from .anthropic_client import AnthropicClient


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


_CLIENTS = {
    LLMProvider.OPENAI: OpenAIClient,
    LLMProvider.ANTHROPIC: AnthropicClient,
}


def create_llm_client(
    provider: Union[LLMProvider, str],
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    timeout: Optional[float] = None
) -> BaseLLMClient:
    """
    Create an LLM client for the specified provider.

    Args:
        provider: LLM provider (openai or anthropic)
        api_key: API key for the provider
        model: Optional model override
        timeout: Optional request timeout in seconds

    Returns:
        Configured LLM client

    Raises:
        ValueError: If provider is not supported
    """
    try:
        provider = LLMProvider(provider)
    except ValueError:
        raise ValueError(f"Unsupported LLM provider: {provider}") from None

    return _CLIENTS[provider](api_key=api_key, model=model, timeout=timeout)

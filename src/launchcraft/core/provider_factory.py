"""Factory for building the generation client from configuration."""

import os
from typing import Optional

from launchcraft.core.config import Config
from launchcraft.core.errors import ConfigurationError
from launchcraft.core.generation_client import CopyGenerator, GenerationClient
from launchcraft.core.retry import RetryingGenerationClient
from launchcraft.core.usage import UsageTracker

OPENROUTER_ENDPOINT = "https://openrouter.ai/api/v1"

SUPPORTED_PROVIDERS = ("openai", "openrouter")


def create_generation_client(
    config: Config,
    usage_tracker: Optional[UsageTracker] = None,
) -> CopyGenerator:
    """
    Create a generation client for the configured provider.

    A missing API key is not an error here: the client raises
    ConfigurationError on its first call instead, before any network access.

    Args:
        config: Loaded configuration
        usage_tracker: Optional tracker for token usage and cost

    Returns:
        GenerationClient, wrapped in RetryingGenerationClient when max_retries > 0

    Raises:
        ConfigurationError: If the provider is unknown
    """
    if config.provider == "openai":
        client = GenerationClient(
            api_key=config.api_key,
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
            base_url=config.base_url,
            provider="openai",
            usage_tracker=usage_tracker,
        )
    elif config.provider == "openrouter":
        # OpenRouter asks for these optional attribution headers
        default_headers = {
            "HTTP-Referer": os.getenv("OPENROUTER_HTTP_REFERER", "https://github.com/launchcraft"),
            "X-Title": os.getenv("OPENROUTER_X_TITLE", "LaunchCraft"),
        }
        client = GenerationClient(
            api_key=config.api_key,
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
            base_url=config.base_url or OPENROUTER_ENDPOINT,
            provider="openrouter",
            usage_tracker=usage_tracker,
            default_headers=default_headers,
        )
    else:
        raise ConfigurationError(
            f"Unknown provider: {config.provider}. Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )

    if config.max_retries and int(config.max_retries) > 0:
        return RetryingGenerationClient(client, max_retries=int(config.max_retries))
    return client

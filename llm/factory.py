"""Factory for creating extraction provider instances."""

from config import Config
from llm.providers.base import ExtractionProvider
from logger import get_logger

logger = get_logger()


def get_extraction_provider(config: Config, provider_name: str = None) -> ExtractionProvider:
    """Create an extraction provider based on configuration.

    Args:
        config: Application configuration.
        provider_name: Overrides ``config.llm_provider`` when given.

    Returns:
        ExtractionProvider instance.

    Raises:
        ValueError: If no provider is configured, the provider is unknown,
                    or its API key is missing.
    """
    provider_name = provider_name or config.llm_provider

    if provider_name == "openai":
        if not config.llm_openai_api_key:
            raise ValueError("OpenAI provider selected but llm.openai_api_key not configured")

        from llm.providers.openai import OpenAIProvider

        logger.info(f"Initializing OpenAI provider (model: {config.llm_openai_model or 'default'})")
        return OpenAIProvider(api_key=config.llm_openai_api_key, model=config.llm_openai_model)

    elif provider_name == "gemini":
        if not config.llm_gemini_api_key:
            raise ValueError("Gemini provider selected but llm.gemini_api_key not configured")

        from llm.providers.gemini import GeminiProvider

        logger.info(f"Initializing Gemini provider (model: {config.llm_gemini_model or 'default'})")
        return GeminiProvider(api_key=config.llm_gemini_api_key, model=config.llm_gemini_model)

    elif not provider_name:
        raise ValueError("No extraction provider configured (set llm.provider)")

    else:
        raise ValueError(f"Unknown extraction provider: {provider_name}")

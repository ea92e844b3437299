"""AI providers that extract statement data and generate spending insights."""

from llm.factory import get_extraction_provider

__all__ = ["get_extraction_provider"]

"""AI provider adapters."""

from engage_dashboard.adapters.ai.base import AIProvider
from engage_dashboard.adapters.ai.stub import StubAIProvider
from engage_dashboard.config import settings
from engage_dashboard.logging import get_logger

logger = get_logger(__name__)


def get_ai_provider(name: str | None = None) -> AIProvider:
    """Get the configured AI provider."""
    provider_name = (name or settings.training_provider).lower()

    if provider_name == "stub":
        return StubAIProvider()
    # Add other providers here as they're implemented

    logger.warning("unknown_ai_provider", provider=provider_name, fallback="stub")
    return StubAIProvider()


__all__ = [
    "AIProvider",
    "StubAIProvider",
    "get_ai_provider",
]

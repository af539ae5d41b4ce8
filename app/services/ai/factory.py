"""
AI Provider Factory
Picks the configured provider; returns None when none is usable so callers
can degrade (resume pipeline) or answer 503 (AI helper endpoints).
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException

from app.core.config import get_settings
from .base import AIProvider
from .azure_openai_service import AzureOpenAIProvider
from .gemini_service import GeminiProvider

logger = logging.getLogger(__name__)


class AIFactory:
    """Factory to get AI provider based on configuration"""

    _providers = {
        "gemini": GeminiProvider,
        "azure": AzureOpenAIProvider,
    }

    _instances = {}  # Singleton instances

    @classmethod
    def get_provider(cls, provider_name: Optional[str] = None) -> Optional[AIProvider]:
        """
        Get AI provider instance

        Args:
            provider_name: 'gemini' or 'azure'. If None, uses settings.ai_provider

        Returns:
            AIProvider instance, or None if the provider is disabled,
            unknown, or missing credentials
        """
        if provider_name is None:
            provider_name = get_settings().ai_provider
        provider_name = (provider_name or "none").lower()

        if provider_name in cls._instances:
            return cls._instances[provider_name]

        provider_class = cls._providers.get(provider_name)
        if provider_class is None:
            if provider_name != "none":
                logger.warning(
                    f"Unknown AI provider '{provider_name}'. "
                    f"Available providers: {', '.join(cls._providers)}"
                )
            return None

        if not cls._is_configured(provider_name):
            logger.info(f"AI provider '{provider_name}' has no credentials; AI features disabled")
            return None

        try:
            instance = provider_class()
        except Exception as e:
            logger.error(f"Failed to initialize {provider_name}: {e}")
            return None

        cls._instances[provider_name] = instance
        logger.info(f"Initialized AI provider: {provider_name}")
        return instance

    @classmethod
    def _is_configured(cls, provider_name: str) -> bool:
        """Check that the credentials the provider needs are set"""
        settings = get_settings()
        if provider_name == "gemini":
            return bool(settings.gemini_api_key)
        if provider_name == "azure":
            return all([
                settings.azure_openai_endpoint,
                settings.azure_openai_key,
                settings.azure_openai_deployment,
            ])
        return False


def get_ai_provider() -> Optional[AIProvider]:
    """FastAPI dependency - configured provider or None."""
    return AIFactory.get_provider()


def require_ai_provider(provider: Optional[AIProvider] = Depends(get_ai_provider)) -> AIProvider:
    """FastAPI dependency - configured provider, 503 when AI is unavailable."""
    if provider is None:
        raise HTTPException(status_code=503, detail="AI service is not configured")
    return provider

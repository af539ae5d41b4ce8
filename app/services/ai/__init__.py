"""AI services package"""
from .base import AIProvider, AIProviderError, extract_json
from .factory import AIFactory, get_ai_provider, require_ai_provider

__all__ = [
    "AIProvider",
    "AIProviderError",
    "AIFactory",
    "extract_json",
    "get_ai_provider",
    "require_ai_provider",
]

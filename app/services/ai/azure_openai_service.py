"""
Azure OpenAI Service Implementation
Uses the openai library's Azure client against a chat-completions deployment.
"""
import logging
from typing import Optional

from openai import AsyncAzureOpenAI, OpenAIError

from app.core.config import get_settings
from .base import AIProvider, AIProviderError

logger = logging.getLogger(__name__)


class AzureOpenAIProvider(AIProvider):
    """Azure OpenAI API implementation"""

    def __init__(self):
        settings = get_settings()
        self.client = AsyncAzureOpenAI(
            api_key=settings.azure_openai_key,
            api_version=settings.azure_openai_api_version,
            azure_endpoint=settings.azure_openai_endpoint,
        )
        # Azure addresses models by deployment name
        self.deployment = settings.azure_openai_deployment

    async def generate_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: Optional[float] = None,
    ) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self.client.chat.completions.create(
                model=self.deployment,
                messages=messages,
                max_tokens=max_tokens,
                temperature=self.default_temperature if temperature is None else temperature,
            )
        except OpenAIError as e:
            logger.error(f"Azure OpenAI request failed: {e}")
            raise AIProviderError(f"Azure OpenAI request failed: {e}") from e

        text = response.choices[0].message.content if response.choices else None
        if not text:
            raise AIProviderError("Azure OpenAI returned an empty response")
        return text

    @property
    def name(self) -> str:
        return "azure"

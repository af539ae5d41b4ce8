"""
Google Gemini Service Implementation
Default provider: fast and cheap enough for per-request resume generation.
"""
import logging
from typing import Optional

import google.generativeai as genai

from app.core.config import get_settings
from .base import AIProvider, AIProviderError

logger = logging.getLogger(__name__)


class GeminiProvider(AIProvider):
    """Google Gemini API implementation"""

    def __init__(self):
        settings = get_settings()
        genai.configure(api_key=settings.gemini_api_key)
        self.model_name = settings.gemini_model

    async def generate_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: Optional[float] = None,
    ) -> str:
        model = genai.GenerativeModel(self.model_name, system_instruction=system_prompt)
        try:
            response = await model.generate_content_async(
                prompt,
                generation_config=genai.types.GenerationConfig(
                    temperature=self.default_temperature if temperature is None else temperature,
                    max_output_tokens=max_tokens,
                ),
            )
            text = response.text
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise AIProviderError(f"Gemini request failed: {e}") from e

        if not text:
            raise AIProviderError("Gemini returned an empty response")
        return text

    @property
    def name(self) -> str:
        return "gemini"

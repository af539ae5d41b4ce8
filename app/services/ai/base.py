"""
Base AI Provider Interface
Abstract class for the text-generation providers (Gemini, Azure OpenAI)
"""
import json
import re
from abc import ABC, abstractmethod
from typing import Any, Optional


class AIProviderError(Exception):
    """Provider call failed or returned something unusable."""


class AIProvider(ABC):
    """Base class for all AI providers"""

    # Low temp for consistent structured output
    default_temperature = 0.2

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: Optional[float] = None,
    ) -> str:
        """
        Send one prompt, return the raw text answer.

        Raises:
            AIProviderError: on any transport or API failure
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name"""
        pass

    async def generate_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 2048,
    ) -> Any:
        """Send one prompt whose answer must be JSON; return the parsed value."""
        text = await self.generate_text(prompt, system_prompt=system_prompt, max_tokens=max_tokens)
        return extract_json(text)


def extract_json(text: str) -> Any:
    """
    Extract JSON from a model response.
    Handles cases where the model wraps JSON in markdown code blocks
    or adds a sentence before/after it.
    """
    if text is None:
        raise AIProviderError("Empty response")

    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    cleaned = cleaned.strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    # Fall back to the outermost object/array in the text
    match = re.search(r"(\{.*\}|\[.*\])", cleaned, re.DOTALL)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError as e:
            raise AIProviderError(f"Invalid JSON in response: {e}") from e
    raise AIProviderError("No JSON found in response")

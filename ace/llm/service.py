import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from ace.core.config import AppConfig

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class LLMError(Exception):
    """Text generation failed (transport error, non-200 status, or unparseable response)."""


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Raises:
            LLMError: when no text could be generated
        """
        pass


class StubLLMClient(LLMClient):
    """Deterministic stub LLM client for testing and when LLM is disabled."""

    def __init__(self, response: Optional[str] = None):
        self.response = response
        self.prompts = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.response is not None:
            return self.response

        # Echo the meeting name so stubbed briefs are still distinguishable
        for line in prompt.splitlines():
            line = line.strip()
            if line.startswith("- Name:"):
                return f"Brief: {line[len('- Name:'):].strip()}"
        return "Brief unavailable."


class GeminiClient(LLMClient):
    """Google Gemini generateContent client."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client = http_client

    @property
    def endpoint(self) -> str:
        return f"{GEMINI_BASE_URL}/{self.model}:generateContent"

    def complete(self, prompt: str) -> str:
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        params = {"key": self.api_key}

        logger.info(f"Gemini request: prompt length {len(prompt)}")
        try:
            if self._client is not None:
                response = self._client.post(self.endpoint, params=params, json=payload, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.endpoint, params=params, json=payload)
        except httpx.TimeoutException as e:
            raise LLMError(f"Gemini API timeout after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise LLMError(f"Gemini API request failed: {type(e).__name__}") from e

        if response.status_code != 200:
            raise LLMError(f"Gemini API error: {response.status_code}")

        try:
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMError("Failed to parse Gemini response") from e

        if not isinstance(text, str):
            raise LLMError("Failed to parse Gemini response")
        return text


def select_llm_client(config: AppConfig) -> LLMClient:
    """Factory function to select LLM client based on configuration."""
    if not config.llm_enabled:
        return StubLLMClient()

    if not config.gemini_api_key:
        # Fall back to stub if no API key
        logger.warning("LLM_ENABLED is set but GEMINI_API_KEY is missing. Using StubLLMClient.")
        return StubLLMClient()

    return GeminiClient(
        api_key=config.gemini_api_key,
        model=config.gemini_model,
        timeout=config.llm_timeout_seconds,
    )

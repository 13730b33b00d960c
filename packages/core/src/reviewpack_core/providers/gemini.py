from __future__ import annotations

import requests

from reviewpack_core.errors import ConfigurationError, FormatError, TransportError
from reviewpack_core.providers.base import BaseGenerator, RetryPolicy

DEFAULT_API_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiGenerator(BaseGenerator):
    MODEL = "gemini-2.5-pro-exp-03-25"
    # No maxOutputTokens: the model may use its full output window.
    CANDIDATE_COUNT = 1

    def __init__(
        self,
        api_key: str | None,
        model: str | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 600,
        retry_policy: RetryPolicy | None = None,
        max_prompt_tokens: int | None = None,
    ):
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY environment variable is not set.")
        super().__init__(retry_policy, max_prompt_tokens)
        self.api_key = api_key
        self.MODEL = model or self.MODEL
        self.endpoint = f"{api_url.rstrip('/')}/{self.MODEL}:generateContent"
        self.timeout = timeout

    def build_payload(self, prompt: str, temperature: float) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": temperature, "candidateCount": self.CANDIDATE_COUNT},
        }

    def _call_api(self, prompt: str, temperature: float) -> str:
        try:
            response = requests.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self.build_payload(prompt, temperature),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Gemini API request failed: {e}") from e

        if not response.ok:
            raise TransportError(f"Gemini API error: {response.reason}")

        try:
            text = response.json()["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise FormatError("Unexpected response format from Gemini API") from e
        if not isinstance(text, str) or not text:
            raise FormatError("Unexpected response format from Gemini API")
        return text

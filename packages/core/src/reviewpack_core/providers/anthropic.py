from __future__ import annotations

from reviewpack_core.errors import ConfigurationError, FormatError, TransportError
from reviewpack_core.providers.base import BaseGenerator, RetryPolicy


class AnthropicGenerator(BaseGenerator):
    MODEL = "claude-sonnet-4-20250514"
    # The Messages API requires an explicit output cap.
    MAX_TOKENS = 16000
    MAX_PROMPT_TOKENS = 180_000

    def __init__(
        self,
        api_key: str | None,
        model: str | None = None,
        timeout: float = 600,
        retry_policy: RetryPolicy | None = None,
        max_prompt_tokens: int | None = None,
    ):
        if not api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY environment variable is not set.")
        try:
            from anthropic import Anthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for this provider. "
                "Install it with: pip install 'reviewpack[anthropic]'"
            )
        super().__init__(retry_policy, max_prompt_tokens)
        self.MODEL = model or self.MODEL
        self.client = Anthropic(api_key=api_key, timeout=timeout)

    def _call_api(self, prompt: str, temperature: float) -> str:
        # Imported inside the method because the anthropic package is optional;
        # __init__ already validated it is installed before we reach here.
        from anthropic import APIError
        from anthropic.types import TextBlock

        try:
            response = self.client.messages.create(
                model=self.MODEL,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=self.MAX_TOKENS,
            )
        except APIError as e:
            raise TransportError(f"Anthropic API error: {e}") from e

        text = "".join(block.text for block in response.content if isinstance(block, TextBlock)).strip()
        if not text:
            raise FormatError("Unexpected response format from Anthropic API")
        return text

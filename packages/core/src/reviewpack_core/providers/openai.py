from __future__ import annotations

from reviewpack_core.errors import ConfigurationError, FormatError, TransportError
from reviewpack_core.providers.base import BaseGenerator, RetryPolicy


class OpenAIGenerator(BaseGenerator):
    MODEL = "gpt-4o"
    # gpt-4o shares one 128k window between prompt and completion.
    MAX_PROMPT_TOKENS = 120_000

    def __init__(
        self,
        api_key: str | None,
        model: str | None = None,
        timeout: float = 600,
        retry_policy: RetryPolicy | None = None,
        max_prompt_tokens: int | None = None,
    ):
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY environment variable is not set.")
        try:
            from openai import OpenAI
        except ImportError:
            raise ImportError(
                "The 'openai' package is required for this provider. " "Install it with: pip install 'reviewpack[openai]'"
            )
        super().__init__(retry_policy, max_prompt_tokens)
        self.MODEL = model or self.MODEL
        self.client = OpenAI(api_key=api_key, timeout=timeout)

    def _call_api(self, prompt: str, temperature: float) -> str:
        from openai import OpenAIError

        try:
            response = self.client.chat.completions.create(
                model=self.MODEL,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                n=1,
            )
        except OpenAIError as e:
            raise TransportError(f"OpenAI API error: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise FormatError("Unexpected response format from OpenAI API")
        return response.choices[0].message.content

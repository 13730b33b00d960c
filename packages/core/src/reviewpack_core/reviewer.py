"""Core review orchestration: pick a generator and run one review request."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from reviewpack_core.config import ReviewPackConfig
from reviewpack_core.errors import ConfigurationError
from reviewpack_core.models import GeneratedReview, ReviewRequest, ReviewResult
from reviewpack_core.providers.base import BaseGenerator, RetryPolicy
from reviewpack_core.runlog import RunLog

logger = logging.getLogger(__name__)


@dataclass
class ReviewOutcome:
    """Result returned by run_review - the envelope plus what the CLI persists and reports."""

    result: ReviewResult
    model: str
    review: GeneratedReview | None = None
    generated_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def get_generator(config: ReviewPackConfig) -> BaseGenerator:
    """Build the generator for the configured provider.

    The token ceiling from config applies to Gemini; the SDK providers keep
    the smaller ceilings of their own context windows.
    """
    policy = RetryPolicy(max_attempts=config.max_attempts, base_delay=config.retry_base_delay)
    provider = config.provider

    if provider == "gemini":
        from reviewpack_core.providers.gemini import GeminiGenerator

        return GeminiGenerator(
            api_key=config.gemini_api_key,
            model=config.gemini_model,
            api_url=config.gemini_api_url,
            timeout=config.request_timeout,
            retry_policy=policy,
            max_prompt_tokens=config.max_prompt_tokens,
        )
    if provider == "anthropic":
        from reviewpack_core.providers.anthropic import AnthropicGenerator

        return AnthropicGenerator(
            api_key=config.anthropic_api_key,
            model=config.anthropic_model,
            timeout=config.request_timeout,
            retry_policy=policy,
        )
    if provider == "openai":
        from reviewpack_core.providers.openai import OpenAIGenerator

        return OpenAIGenerator(
            api_key=config.openai_api_key,
            model=config.openai_model,
            timeout=config.request_timeout,
            retry_policy=policy,
        )
    raise ConfigurationError(f"Unknown model provider: {provider!r}. Choose 'gemini', 'anthropic' or 'openai'.")


def run_review(
    request: ReviewRequest,
    config: ReviewPackConfig,
    log: RunLog | None = None,
    generator: BaseGenerator | None = None,
) -> ReviewOutcome:
    """Run one review request end to end.

    Raises ConfigurationError before any network call when the provider's
    credentials are missing. Every other failure is reported through the
    returned ReviewResult.
    """
    log = log if log is not None else RunLog()
    generator = generator if generator is not None else get_generator(config)

    if not request.tickets:
        log.warn("LLM", "No Jira ticket data supplied")
    if not request.pull_requests:
        log.warn("LLM", "No GitHub PR data supplied")

    result = generator.generate(request, log)
    review = GeneratedReview(review=result.data) if result.success and result.data is not None else None
    if review is None:
        logger.error("Code review generation failed: %s", result.error)
    return ReviewOutcome(result=result, model=generator.MODEL, review=review)

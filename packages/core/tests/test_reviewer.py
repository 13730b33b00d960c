"""Tests for review orchestration."""

import pytest

from reviewpack_core.config import ReviewPackConfig
from reviewpack_core.errors import ConfigurationError, TransportError
from reviewpack_core.models import ReviewRequest
from reviewpack_core.prompt import REQUIRED_SECTIONS
from reviewpack_core.providers.base import BaseGenerator
from reviewpack_core.providers.gemini import GeminiGenerator
from reviewpack_core.reviewer import get_generator, run_review
from reviewpack_core.runlog import RunLog

VALID_REVIEW = "\n".join(REQUIRED_SECTIONS)


class _StubGenerator(BaseGenerator):
    MODEL = "stub"

    def __init__(self, response):
        super().__init__()
        self.response = response

    def _call_api(self, prompt: str, temperature: float) -> str:
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class TestGetGenerator:
    def test_gemini_uses_config(self):
        config = ReviewPackConfig(gemini_api_key="key", max_prompt_tokens=1000, max_attempts=2, request_timeout=30)
        generator = get_generator(config)
        assert isinstance(generator, GeminiGenerator)
        assert generator.MAX_PROMPT_TOKENS == 1000
        assert generator.retry_policy.max_attempts == 2
        assert generator.timeout == 30

    def test_missing_key_fails_before_network(self):
        with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
            get_generator(ReviewPackConfig())

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="Unknown model provider"):
            get_generator(ReviewPackConfig(provider="llama"))


class TestRunReview:
    def test_success_produces_generated_review(self):
        outcome = run_review(ReviewRequest(concatenated_files="x"), ReviewPackConfig(), generator=_StubGenerator(VALID_REVIEW))
        assert outcome.result.success
        assert outcome.model == "stub"
        assert outcome.review.review == VALID_REVIEW
        assert outcome.review.to_dict()["score"] == 0

    def test_failure_has_no_review(self):
        outcome = run_review(ReviewRequest(), ReviewPackConfig(), generator=_StubGenerator(TransportError("down")))
        assert not outcome.result.success
        assert outcome.result.error == "down"
        assert outcome.review is None

    def test_warns_about_missing_inputs(self):
        log = RunLog()
        run_review(ReviewRequest(), ReviewPackConfig(), log=log, generator=_StubGenerator(VALID_REVIEW))
        warnings = [e.message for e in log.filter(level="warn")]
        assert "No Jira ticket data supplied" in warnings
        assert "No GitHub PR data supplied" in warnings

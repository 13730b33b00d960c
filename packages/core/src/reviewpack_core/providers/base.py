"""Base generator implementing the Template Method pattern.

All providers share the same generation algorithm:
    generate() → build_prompt() + reinforce_sections()
               → token gate
               → attempt loop → _call_api()   ← only this differs per provider
               → validate_response()

Subclasses implement two things only:
  - __init__: validate credentials and store the client/endpoint
  - _call_api: make one raw API call at a given temperature and return the text

The attempt budget, temperature schedule and inter-attempt delay live in a
RetryPolicy so a different backoff can be substituted without touching the
prompt or validation logic.
"""

from __future__ import annotations

import logging
import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

from reviewpack_core.errors import InputError, ReviewPackError, ValidationError
from reviewpack_core.models import ReviewRequest, ReviewResult
from reviewpack_core.prompt import REQUIRED_SECTIONS, build_prompt, reinforce_sections
from reviewpack_core.runlog import RunLog

logger = logging.getLogger(__name__)

MAX_PROMPT_TOKENS = 1_800_000


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_temperature: float = 0.7
    min_temperature: float = 0.3
    temperature_step: float = 0.1
    base_delay: float = 0.0  # seconds; 0 = retry immediately

    def temperature(self, attempt: int) -> float:
        """Sampling temperature for a zero-based attempt; lowered on retries for more focused output."""
        if attempt == 0:
            return self.base_temperature
        return round(max(self.min_temperature, self.base_temperature - self.temperature_step * attempt), 2)

    def delay(self, attempt: int) -> float:
        """Seconds to wait before a zero-based attempt."""
        if attempt == 0 or not self.base_delay:
            return 0.0
        return self.base_delay * 2 ** (attempt - 1)


def estimate_tokens(prompt: str) -> int:
    return math.ceil(len(prompt) / 4)


def missing_sections(text: str) -> list[str]:
    return [header for header in REQUIRED_SECTIONS if header not in text]


def validate_response(text: str) -> bool:
    """True when every required section header appears somewhere in ``text``."""
    return not missing_sections(text)


class BaseGenerator(ABC):
    MAX_PROMPT_TOKENS: int = MAX_PROMPT_TOKENS
    MODEL: str = ""

    def __init__(self, retry_policy: RetryPolicy | None = None, max_prompt_tokens: int | None = None):
        self.retry_policy = retry_policy or RetryPolicy()
        if max_prompt_tokens is not None:
            self.MAX_PROMPT_TOKENS = max_prompt_tokens

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def generate(self, request: ReviewRequest, log: RunLog | None = None) -> ReviewResult:
        """Generate a review for ``request``; never raises for expected failures."""
        log = log if log is not None else RunLog()
        started = time.monotonic()

        log.info(
            "LLM",
            "Starting code review generation",
            f"tickets={len(request.tickets)} prs={len(request.pull_requests)} "
            f"files={len(request.concatenated_files)} chars references={len(request.reference_files)}",
        )

        prompt = self.prepare_prompt(request)
        estimated = estimate_tokens(prompt)
        log.info("LLM", "Generated prompt", f"{len(prompt)} characters, ~{estimated} tokens")

        if estimated > self.MAX_PROMPT_TOKENS:
            message = f"Prompt too large ({estimated} tokens). Maximum allowed is {self.MAX_PROMPT_TOKENS} tokens."
            log.error("LLM", message)
            return ReviewResult(success=False, error=message, error_type=InputError.__name__)

        return self._generate_with_retry(prompt, log, started)

    def prepare_prompt(self, request: ReviewRequest) -> str:
        return reinforce_sections(build_prompt(request))

    # ------------------------------------------------------------------ #
    # Abstract - implement in each provider                               #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _call_api(self, prompt: str, temperature: float) -> str:
        """Make a single API call and return the generated text.

        Raise TransportError for HTTP/network failures and FormatError when
        the response lacks the generated text. _generate_with_retry handles
        retries and logging.
        """

    # ------------------------------------------------------------------ #
    # Shared implementations                                               #
    # ------------------------------------------------------------------ #

    def _generate_with_retry(self, prompt: str, log: RunLog, started: float) -> ReviewResult:
        policy = self.retry_policy
        last_error: ReviewPackError | None = None

        for attempt in range(policy.max_attempts):
            delay = policy.delay(attempt)
            if delay:
                time.sleep(delay)

            temperature = policy.temperature(attempt)
            log.info(
                "LLM",
                f"Sending request (attempt {attempt + 1}/{policy.max_attempts})",
                f"model={self.MODEL} temperature={temperature}",
            )
            try:
                text = self._call_api(prompt, temperature)
            except ReviewPackError as e:
                last_error = e
                log.error("LLM", f"Attempt {attempt + 1} failed", str(e))
                continue

            log.info(
                "LLM",
                "Received response",
                f"{len(text)} characters after {time.monotonic() - started:.2f}s",
            )
            missing = missing_sections(text)
            if not missing:
                log.info("LLM", "Code review generation complete")
                return ReviewResult(success=True, data=text)

            # Validation failures discard the text and do not replace last_error.
            log.warn("LLM", f"Attempt {attempt + 1} failed: missing required sections", ", ".join(missing))

        if last_error is not None:
            return ReviewResult(success=False, error=str(last_error), error_type=type(last_error).__name__)
        return ReviewResult(
            success=False,
            error=f"Failed to generate valid review after {policy.max_attempts} attempts",
            error_type=ValidationError.__name__,
        )

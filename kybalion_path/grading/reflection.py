"""
Reflection grading client.

Posts free-text reflections to the grading proxy and falls back to a local
length heuristic whenever the proxy cannot be reached or answers badly.
The client never holds model API keys; the proxy does.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from kybalion_path.content.models import Language

DEFAULT_PROXY_URL = "http://localhost:8787"
DEFAULT_TIMEOUT_SECONDS = 6.0
EVALUATE_PATH = "/api/evaluate-reflection"

MIN_REFLECTION_LENGTH = 10

_SIMULATED_FEEDBACK = {
    "en": {
        "short": "That was a bit short. Can you elaborate?",
        "ok": "Good thought. It is important to see this connection.",
    },
    "de": {
        "short": "Das war etwas kurz. Kannst du das etwas genauer ausführen?",
        "ok": "Guter Gedanke. Es ist wichtig, diese Verbindung zu sehen.",
    },
}


class ReflectionFeedback(BaseModel):
    """Grader verdict for one reflection."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    score: int = Field(ge=0, le=100)
    feedback: str
    is_pass: bool


def simulate_evaluation(text: str, language: Language | str) -> ReflectionFeedback:
    """Local stand-in verdict: long enough passes, too short fails."""
    messages = _SIMULATED_FEEDBACK[Language(language).value]
    if len(text.strip()) < MIN_REFLECTION_LENGTH:
        return ReflectionFeedback(score=20, feedback=messages["short"], is_pass=False)
    return ReflectionFeedback(score=85, feedback=messages["ok"], is_pass=True)


class ReflectionGrader:
    """HTTP client for the reflection grading proxy."""

    def __init__(
        self,
        base_url: str = DEFAULT_PROXY_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the grader.

        Args:
            base_url: Proxy base URL
            timeout_seconds: Request timeout before falling back to simulation
            transport: Custom httpx transport (tests pass a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.client = httpx.Client(
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> ReflectionGrader:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def evaluate_remote(
        self, prompt: str, user_answer: str, language: Language | str
    ) -> ReflectionFeedback:
        """
        Ask the proxy to grade a reflection.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
            ValueError: On a body that is not JSON
            ValidationError: On JSON that is not a verdict
        """
        response = self.client.post(
            f"{self.base_url}{EVALUATE_PATH}",
            json={
                "prompt": prompt,
                "userAnswer": user_answer,
                "language": Language(language).value,
            },
        )
        response.raise_for_status()
        return ReflectionFeedback.model_validate(response.json())

    def evaluate(
        self, prompt: str, user_answer: str, language: Language | str
    ) -> ReflectionFeedback:
        """
        Grade a reflection, falling back to simulation on any proxy failure.

        Args:
            prompt: Reflection question shown to the user
            user_answer: The user's text
            language: Language for the verdict

        Returns:
            ReflectionFeedback from the proxy or the local heuristic
        """
        try:
            return self.evaluate_remote(prompt, user_answer, language)
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.warning(f"Grading proxy unavailable; using simulation mode: {e}")
            return simulate_evaluation(user_answer, language)

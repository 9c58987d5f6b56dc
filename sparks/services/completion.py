"""
Completion Service client using Groq.

Sends a system instruction plus user text to an OpenAI-compatible
chat-completions endpoint and returns the generated text. One request per
call; failures are raised immediately, never retried.
"""

import logging
import time
from typing import Optional

import requests

from sparks.config import GROQ_API_KEY, GROQ_MODEL, COMPLETION_MAX_TOKENS, REQUEST_TIMEOUT
from sparks.errors import MalformedResponseError, RateLimitError, UpstreamError

logger = logging.getLogger(__name__)


# Phrases providers use in error bodies when a quota is exhausted
RATE_LIMIT_MARKERS = (
    "rate limit",
    "rate_limit",
    "too many requests",
    "quota",
    "resource exhausted",
    "resource_exhausted",
)


def is_rate_limited(status_code: int, message: str) -> bool:
    """True if a failed response signals quota exhaustion rather than a plain error."""
    if status_code == 429:
        return True
    lowered = (message or "").lower()
    return any(marker in lowered for marker in RATE_LIMIT_MARKERS)


class CompletionClient:
    """Text completion over the Groq chat-completions API."""

    API_URL = "https://api.groq.com/openai/v1/chat/completions"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
        max_tokens: Optional[int] = None,
    ):
        self.api_key = api_key if api_key is not None else GROQ_API_KEY
        self.model = model or GROQ_MODEL
        self.timeout = timeout or REQUEST_TIMEOUT
        self.max_tokens = max_tokens or COMPLETION_MAX_TOKENS

    def is_available(self) -> bool:
        """Check if the completion service is configured (API key present)."""
        return bool(self.api_key)

    def complete(self, system_prompt: str, user_text: str) -> str:
        """
        Run a single completion.

        Args:
            system_prompt: Instruction describing the task and output format.
            user_text: The user's content.

        Returns:
            The generated text, stripped of surrounding whitespace.

        Raises:
            RateLimitError: The service reported too many requests or an exhausted quota.
            UpstreamError: The service is unconfigured, unreachable or returned an error.
            MalformedResponseError: A success response without any generated text.
        """
        if not self.is_available():
            raise UpstreamError("AI service not configured. Add GROQ_API_KEY to .env")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
            "max_tokens": self.max_tokens,
            "temperature": 0.2,
        }

        started = time.monotonic()
        try:
            response = requests.post(
                self.API_URL,
                headers=headers,
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Completion request failed: %s", e)
            raise UpstreamError(f"AI service unreachable: {e}") from e

        elapsed_ms = (time.monotonic() - started) * 1000

        if response.status_code != 200:
            error_msg = self._error_message(response)
            logger.warning(
                "Completion request returned %s after %.0fms: %s",
                response.status_code, elapsed_ms, error_msg,
            )
            if is_rate_limited(response.status_code, error_msg):
                raise RateLimitError(
                    f"AI rate limit reached ({response.status_code}): {error_msg}",
                    status_code=response.status_code,
                )
            raise UpstreamError(
                f"AI error ({response.status_code}): {error_msg}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError("AI returned an unexpected response body", response.text) from e

        if not isinstance(content, str):
            raise MalformedResponseError("AI returned no text content", str(content))

        tokens = data.get("usage", {}).get("total_tokens", 0)
        logger.info("Completion via %s took %.0fms (%s tokens)", self.model, elapsed_ms, tokens)

        return content.strip()

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Pull the provider's error message out of a failed response."""
        try:
            body = response.json()
        except ValueError:
            return response.text
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return error.get("message") or response.text
        if isinstance(error, str):
            return error
        return response.text

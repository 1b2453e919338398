"""Student summaries from an external text-generation service.

The generator builds a fixed prompt from a student and sends it as a
single-turn chat to an Ollama-compatible ``/api/chat`` endpoint:

    {"model": ..., "messages": [{"role": "user", "content": prompt}], "stream": false}

and returns ``message.content`` from the reply verbatim.

Timeout and retry behavior:
    Every attempt is bounded by ``timeout_seconds``. Connection failures
    and timeouts are retried up to ``max_retries`` extra times with
    exponential backoff (``retry_backoff_seconds * 2**attempt``); the
    default of 0 retries makes the call single-shot. Non-2xx replies and
    unparsable bodies are never retried.

Failure classification:
    - cannot connect           -> SummaryUnavailableError (503), connect timeouts included
    - no reply before deadline -> SummaryTimeoutError (504)
    - non-2xx status           -> SummaryUpstreamError (502)
    - body missing the content -> SummaryProtocolError (500)
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import requests

from .config import Settings
from .errors import (
    SummaryProtocolError,
    SummaryTimeoutError,
    SummaryUnavailableError,
    SummaryUpstreamError,
)
from .schemas import Student

logger = logging.getLogger("student_api.summary")

PROMPT_TEMPLATE = (
    "Generate a brief summary of this student:\n"
    "Name: {name}\n"
    "Age: {age}\n"
    "Email: {email}\n"
    "Focus on their basic information and potential academic journey based on their age."
)


def build_prompt(student: Student) -> str:
    """Render the summary prompt for `student`."""
    return PROMPT_TEMPLATE.format(name=student.name, age=student.age, email=student.email)


class SummaryGenerator:
    """Client for the text-generation service used by the summary endpoint."""

    def __init__(
        self,
        url: str,
        model: str,
        timeout_seconds: float = 30.0,
        max_retries: int = 0,
        retry_backoff_seconds: float = 0.5,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.retry_backoff_seconds = retry_backoff_seconds
        self.session = session
        # no shared Session by default: each worker thread issues its own request
        self._post = session.post if session is not None else requests.post

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "SummaryGenerator":
        return cls(
            url=settings.SUMMARY_API_URL,
            model=settings.SUMMARY_MODEL,
            timeout_seconds=settings.SUMMARY_TIMEOUT_SECONDS,
            max_retries=settings.SUMMARY_MAX_RETRIES,
            retry_backoff_seconds=settings.SUMMARY_RETRY_BACKOFF_SECONDS,
            session=session,
        )

    def build_payload(self, student: Student) -> dict:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": build_prompt(student)}],
            "stream": False,
        }

    def summarize(self, student: Student) -> str:
        """Return the generated summary text for `student`.

        Raises a `SummaryError` subclass when the service cannot produce one.
        """
        response = self._post_with_retries(self.build_payload(student))
        if not 200 <= response.status_code < 300:
            logger.warning("summary service returned status=%s for student id=%s", response.status_code, student.id)
            raise SummaryUpstreamError(f"summary service returned HTTP {response.status_code}")
        return _extract_content(response)

    def _post_with_retries(self, payload: dict) -> requests.Response:
        attempt = 0
        while True:
            try:
                return self._post(self.url, json=payload, timeout=self.timeout_seconds)
            except requests.exceptions.ConnectionError as exc:
                # also covers ConnectTimeout: the service was never reached
                error = SummaryUnavailableError(f"cannot reach {self.url}")
                cause = exc
            except requests.exceptions.Timeout as exc:
                error = SummaryTimeoutError(f"no reply within {self.timeout_seconds:g}s")
                cause = exc
            except requests.exceptions.RequestException as exc:
                error = SummaryUnavailableError(f"cannot reach {self.url}")
                cause = exc
            if attempt >= self.max_retries:
                logger.warning("summary request failed after %d attempt(s): %s", attempt + 1, cause)
                raise error from cause
            delay = self.retry_backoff_seconds * (2 ** attempt)
            logger.info("summary request failed (%s); retrying in %.2fs", cause, delay)
            time.sleep(delay)
            attempt += 1


def _extract_content(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError as exc:
        raise SummaryProtocolError("summary service reply is not JSON") from exc
    message = data.get("message") if isinstance(data, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise SummaryProtocolError("summary service reply has no message.content")
    return content

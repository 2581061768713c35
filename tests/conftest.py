"""Shared fixtures and fakes for the BrandPulse test suite."""

import threading
import time

import pytest

from brandpulse.core.errors import ProviderError
from brandpulse.core.models import ProviderResult, Sentiment, SentimentResult
from brandpulse.services.fanout import FanOutPolicy


class FakeProvider:
    """Provider that returns a canned answer, raises, or blocks."""

    def __init__(self, name, answer="", error=None, delay=0.0, failures_before_success=0):
        self.name = name
        self.answer = answer
        self.error = error
        self.delay = delay
        self.failures_before_success = failures_before_success
        self.prompts = []
        self._lock = threading.Lock()

    def generate(self, prompt):
        with self._lock:
            self.prompts.append(prompt)
            attempt = len(self.prompts)
        if self.delay:
            time.sleep(self.delay)
        if attempt <= self.failures_before_success:
            raise ProviderError(self.name, f"transient failure {attempt}")
        if self.error is not None:
            raise self.error
        return self.answer


def make_result(name="p", score=50, sentiment=Sentiment.NEUTRAL, mentions=1, succeeded=True):
    if sentiment == Sentiment.NEUTRAL:
        sentiment_result = SentimentResult.neutral()
    else:
        sentiment_result = SentimentResult(overall=sentiment, confidence=0.9)
    return ProviderResult(
        provider_name=name,
        raw_text="",
        mention_count=mentions,
        context_snippets=(),
        sentiment=sentiment_result,
        visibility_score=score,
        latency_ms=0,
        succeeded=succeeded,
    )


@pytest.fixture
def fast_policy():
    """Fan-out policy with no waits so tests stay quick."""
    return FanOutPolicy(
        max_workers=8,
        task_timeout=5.0,
        batch_timeout=10.0,
        max_attempts=1,
        retry_delay=0.0,
        retry_backoff=1.0,
        max_in_flight_per_collaborator=4,
        min_request_interval=0.0,
    )

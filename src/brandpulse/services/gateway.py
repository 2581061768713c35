"""Provider gateway: fan prompts out to every provider and score what comes back."""

import logging
import threading
from typing import List, Optional, Sequence

from ..core.constants import ProviderConstants, ScoringConstants
from ..core.mentions import MentionDetector
from ..core.models import ProviderResult
from ..core.scoring import visibility_score
from ..core.sentiment import SentimentClassifier, brand_sentences
from .fanout import FanOutExecutor, FanOutTask, TaskOutcome
from .providers import ProviderCapability

logger = logging.getLogger(__name__)


class ProviderGateway:
    """Runs one generate call per provider per batch and wraps each answer in a ProviderResult."""

    def __init__(
        self,
        executor: Optional[FanOutExecutor] = None,
        detector: Optional[MentionDetector] = None,
        classifier: Optional[SentimentClassifier] = None,
    ):
        self.executor = executor or FanOutExecutor()
        self.detector = detector or MentionDetector()
        self.classifier = classifier or SentimentClassifier()

    def score_response(self, provider_name: str, brand_name: str, text: str, latency_ms: int = 0) -> ProviderResult:
        """Turn one raw provider answer into a scored result."""
        mentions = self.detector.detect(text, brand_name)
        return ProviderResult(
            provider_name=provider_name,
            raw_text=text,
            mention_count=len(mentions),
            context_snippets=tuple(brand_sentences(text, brand_name)[:ScoringConstants.MAX_CONTEXT_SNIPPETS]),
            sentiment=self.classifier.classify(text, brand_name),
            visibility_score=visibility_score(text, brand_name, self.classifier),
            latency_ms=latency_ms,
            succeeded=True,
        )

    def _to_result(self, outcome: TaskOutcome, brand_name: str) -> ProviderResult:
        if not outcome.ok:
            return ProviderResult.degraded(outcome.collaborator, outcome.latency_ms, outcome.failure.message)
        if not isinstance(outcome.value, str):
            logger.warning(f"❌ {outcome.collaborator}: malformed output of type {type(outcome.value).__name__}")
            return ProviderResult.degraded(outcome.collaborator, outcome.latency_ms, "malformed provider output")
        return self.score_response(outcome.collaborator, brand_name, outcome.value, outcome.latency_ms)

    def run_batch(
        self,
        brand_name: str,
        prompts: Sequence[str],
        providers: Sequence[ProviderCapability],
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ProviderResult]:
        """One result per provider; failed providers are included as degraded results.

        Results come back in completion order.
        """
        if not providers:
            logger.info("No providers configured; returning an empty batch")
            return []

        combined_prompt = ProviderConstants.PROMPT_SEPARATOR.join(prompts)
        tasks = [
            FanOutTask(
                key=f"{provider.name}:{brand_name}",
                collaborator=provider.name,
                call=lambda p=provider: p.generate(combined_prompt),
            )
            for provider in providers
        ]

        logger.info(f"🚀 Querying {len(tasks)} provider(s) for '{brand_name}'")
        outcomes = self.executor.run(tasks, cancel_event)
        results = [self._to_result(outcome, brand_name) for outcome in outcomes]
        logger.info(f"✅ {sum(r.succeeded for r in results)}/{len(results)} provider(s) succeeded for '{brand_name}'")
        return results


def run_provider_batch(
    brand_name: str,
    prompts: Sequence[str],
    providers: Sequence[ProviderCapability],
    executor: Optional[FanOutExecutor] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[ProviderResult]:
    """Convenience wrapper around ProviderGateway.run_batch."""
    return ProviderGateway(executor=executor).run_batch(brand_name, prompts, providers, cancel_event)

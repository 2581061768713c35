"""Bounded concurrent fan-out with per-task isolation, timeouts, retries and cancellation."""

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, stop_when_event_set, wait_exponential

from ..core.config import Settings, settings
from ..core.errors import ProviderError, SourceError, TaskCancelledError, TaskTimeoutError
from ..core.events import EventSink, LoggingEventSink, safe_emit

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS: Tuple[Type[BaseException], ...] = (ProviderError, SourceError, ConnectionError, TimeoutError)


@dataclass(frozen=True)
class FanOutPolicy:
    """Limits applied to one fan-out batch."""
    max_workers: int = 8
    task_timeout: float = 30.0
    batch_timeout: float = 90.0
    max_attempts: int = 3
    retry_delay: float = 1.0
    retry_backoff: float = 2.0
    max_retry_wait: float = 10.0
    max_in_flight_per_collaborator: int = 2
    min_request_interval: float = 1.0

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "FanOutPolicy":
        config = config or settings
        return cls(
            task_timeout=config.task_timeout,
            batch_timeout=config.batch_timeout,
            max_attempts=config.max_retries,
            retry_delay=config.retry_delay,
            retry_backoff=config.retry_backoff,
            max_in_flight_per_collaborator=config.max_in_flight_per_collaborator,
            min_request_interval=config.min_request_interval,
        )


class FailureKind(str, Enum):
    ERROR = "error"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class TaskFailure:
    """Typed marker for a task that produced no value."""
    kind: FailureKind
    message: str
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class FanOutTask:
    """One call against one upstream collaborator."""
    key: str
    collaborator: str
    call: Callable[[], Any]
    retry_on: Tuple[Type[BaseException], ...] = RETRYABLE_ERRORS


@dataclass(frozen=True)
class TaskOutcome:
    key: str
    collaborator: str
    value: Any = None
    failure: Optional[TaskFailure] = None
    latency_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.failure is None


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class FanOutExecutor:
    """Runs tasks concurrently; every task returns a value or a TaskFailure, never raises.

    In-flight calls are capped per collaborator and request starts against one
    collaborator are spaced by ``min_request_interval``. Throttle state lives on the
    executor, so reusing one executor across batches keeps the spacing.
    """

    def __init__(
        self,
        policy: Optional[FanOutPolicy] = None,
        events: Optional[EventSink] = None,
        poll_interval: float = 0.05,
    ):
        self.policy = policy or FanOutPolicy.from_settings()
        self.events = events if events is not None else LoggingEventSink()
        self.poll_interval = poll_interval
        self._lock = threading.Lock()
        self._semaphores: Dict[str, threading.BoundedSemaphore] = {}
        self._next_start: Dict[str, float] = {}

    # ---- per-collaborator resources ----

    def _semaphore(self, collaborator: str) -> threading.BoundedSemaphore:
        with self._lock:
            if collaborator not in self._semaphores:
                self._semaphores[collaborator] = threading.BoundedSemaphore(
                    self.policy.max_in_flight_per_collaborator
                )
            return self._semaphores[collaborator]

    def _throttle(self, collaborator: str, cancel_event: Optional[threading.Event]) -> None:
        """Reserve the next start slot for a collaborator and sleep until it arrives."""
        interval = self.policy.min_request_interval
        if interval <= 0:
            return
        with self._lock:
            now = time.monotonic()
            slot = max(now, self._next_start.get(collaborator, now))
            self._next_start[collaborator] = slot + interval
        delay = slot - now
        if delay > 0:
            if cancel_event is not None:
                cancel_event.wait(delay)
            else:
                time.sleep(delay)

    def _retrying(self, task: FanOutTask, cancel_event: Optional[threading.Event]) -> Retrying:
        stop = stop_after_attempt(self.policy.max_attempts)
        if cancel_event is not None:
            stop = stop | stop_when_event_set(cancel_event)
        return Retrying(
            stop=stop,
            wait=wait_exponential(
                multiplier=self.policy.retry_delay,
                exp_base=self.policy.retry_backoff,
                max=self.policy.max_retry_wait,
            ),
            retry=retry_if_exception_type(task.retry_on),
            reraise=True,
        )

    # ---- task boundary ----

    def _cancelled(self, task: FanOutTask, latency_ms: int = 0) -> TaskOutcome:
        safe_emit(self.events, "task_cancelled", key=task.key, collaborator=task.collaborator)
        return TaskOutcome(
            key=task.key,
            collaborator=task.collaborator,
            failure=TaskFailure(FailureKind.CANCELLED, "task cancelled", TaskCancelledError(task.key)),
            latency_ms=latency_ms,
        )

    def _execute(
        self,
        index: int,
        task: FanOutTask,
        started: Dict[int, float],
        cancel_event: Optional[threading.Event],
    ) -> TaskOutcome:
        # the task budget covers waiting for a slot, not only the call itself
        dispatched = time.monotonic()
        started[index] = dispatched
        semaphore = self._semaphore(task.collaborator)
        while not semaphore.acquire(timeout=self.poll_interval):
            if cancel_event is not None and cancel_event.is_set():
                return self._cancelled(task)
            if time.monotonic() - dispatched > self.policy.task_timeout:
                return self._timed_out(task, dispatched, "timed out waiting for a free slot")

        try:
            if cancel_event is not None and cancel_event.is_set():
                return self._cancelled(task)

            start = time.monotonic()
            safe_emit(self.events, "task_started", key=task.key, collaborator=task.collaborator)

            try:
                for attempt in self._retrying(task, cancel_event):
                    with attempt:
                        self._throttle(task.collaborator, cancel_event)
                        if cancel_event is not None and cancel_event.is_set():
                            raise TaskCancelledError(task.key)
                        value = task.call()
            except TaskCancelledError:
                return self._cancelled(task, _elapsed_ms(start))
            except Exception as e:
                logger.warning(f"❌ {task.collaborator}: task {task.key} failed: {e}")
                safe_emit(self.events, "task_failed", key=task.key, collaborator=task.collaborator, error=str(e))
                return TaskOutcome(
                    key=task.key,
                    collaborator=task.collaborator,
                    failure=TaskFailure(FailureKind.ERROR, str(e), e),
                    latency_ms=_elapsed_ms(start),
                )

            latency_ms = _elapsed_ms(start)
            safe_emit(self.events, "task_succeeded", key=task.key, collaborator=task.collaborator,
                      latency_ms=latency_ms)
            return TaskOutcome(key=task.key, collaborator=task.collaborator, value=value, latency_ms=latency_ms)
        finally:
            semaphore.release()

    def _collect(self, future: Future, task: FanOutTask) -> TaskOutcome:
        if future.cancelled():
            return self._cancelled(task)
        error = future.exception()
        if error is not None:
            # _execute catches everything; this only guards against bugs in it
            return TaskOutcome(
                key=task.key,
                collaborator=task.collaborator,
                failure=TaskFailure(FailureKind.ERROR, str(error), error),
            )
        return future.result()

    def _timed_out(self, task: FanOutTask, start: Optional[float], message: str) -> TaskOutcome:
        logger.warning(f"⏱️ {task.collaborator}: task {task.key} {message}")
        safe_emit(self.events, "task_timeout", key=task.key, collaborator=task.collaborator)
        return TaskOutcome(
            key=task.key,
            collaborator=task.collaborator,
            failure=TaskFailure(FailureKind.TIMEOUT, message, TaskTimeoutError(f"{task.key}: {message}")),
            latency_ms=_elapsed_ms(start) if start is not None else 0,
        )

    # ---- batch ----

    def run(self, tasks: Iterable[FanOutTask], cancel_event: Optional[threading.Event] = None) -> List[TaskOutcome]:
        """Run all tasks and return one outcome per task, in completion order."""
        tasks = list(tasks)
        if not tasks:
            return []

        policy = self.policy
        started: Dict[int, float] = {}
        outcomes: List[TaskOutcome] = []
        pool = ThreadPoolExecutor(
            max_workers=max(1, min(policy.max_workers, len(tasks))),
            thread_name_prefix="brandpulse-fanout",
        )
        submitted: Dict[Future, Tuple[int, FanOutTask]] = {}
        try:
            for index, task in enumerate(tasks):
                future = pool.submit(self._execute, index, task, started, cancel_event)
                submitted[future] = (index, task)

            pending = set(submitted)
            batch_deadline = time.monotonic() + policy.batch_timeout

            while pending:
                done, pending = wait(pending, timeout=self.poll_interval, return_when=FIRST_COMPLETED)
                for future in done:
                    outcomes.append(self._collect(future, submitted[future][1]))
                if not pending:
                    break

                if cancel_event is not None and cancel_event.is_set():
                    for future in pending:
                        future.cancel()
                        outcomes.append(self._cancelled(submitted[future][1]))
                    pending = set()
                    break

                now = time.monotonic()
                if now >= batch_deadline:
                    for future in pending:
                        index, task = submitted[future]
                        future.cancel()
                        outcomes.append(self._timed_out(task, started.get(index), "exceeded batch timeout"))
                    pending = set()
                    break

                expired = set()
                for future in pending:
                    index, task = submitted[future]
                    start = started.get(index)
                    if start is not None and now - start > policy.task_timeout:
                        expired.add(future)
                        outcomes.append(
                            self._timed_out(task, start, f"exceeded {policy.task_timeout}s timeout")
                        )
                pending -= expired
        finally:
            # Abandoned calls keep running in their threads; nothing waits for them
            pool.shutdown(wait=False, cancel_futures=True)

        failed = sum(1 for o in outcomes if not o.ok)
        safe_emit(self.events, "batch_completed", tasks=len(tasks), succeeded=len(outcomes) - failed, failed=failed)
        return outcomes

"""Error taxonomy for BrandPulse."""

from typing import List, Optional, Sequence


class BrandPulseError(Exception):
    """Base class for all BrandPulse errors."""


class InputValidationError(BrandPulseError, ValueError):
    """Caller input violates a request contract.

    This is the only error class the analysis services let through to the caller.
    """

    def __init__(self, problems: Sequence[str]):
        self.problems: List[str] = list(problems) or ["invalid input"]
        super().__init__("; ".join(self.problems))


class ProviderError(BrandPulseError):
    """A text-generation provider failed (auth, transport, malformed response)."""

    def __init__(self, provider: str, message: str, cause: Optional[BaseException] = None):
        self.provider = provider
        self.cause = cause
        super().__init__(f"{provider}: {message}")


class SourceError(BrandPulseError):
    """A content source failed to return items."""

    def __init__(self, source: str, message: str, cause: Optional[BaseException] = None):
        self.source = source
        self.cause = cause
        super().__init__(f"{source}: {message}")


class TaskTimeoutError(BrandPulseError):
    """A fan-out task exceeded its time budget."""


class TaskCancelledError(BrandPulseError):
    """A fan-out task was cancelled before it produced a result."""


class CategorizationError(BrandPulseError):
    """Categorizing, tagging or relating one artifact failed."""

    def __init__(self, artifact_id: str, cause: BaseException):
        self.artifact_id = artifact_id
        self.cause = cause
        super().__init__(f"Failed to categorize artifact {artifact_id}: {cause}")

"""Error taxonomy for the Lookout pipeline.

Only ``LookoutValidationError`` ends an invocation without results. Provider
and search-service errors are recovered where they happen (original question,
manual search links). Cancellation uses ``asyncio.CancelledError`` and is
never reported to the user.
"""


class LookoutError(Exception):
    """Base class for pipeline errors."""


class LookoutValidationError(LookoutError):
    """Malformed request parameters or an input that is not a lookout command."""


class ProviderError(LookoutError):
    """The AI completion provider failed, timed out or returned nothing."""

    def __init__(self, message: str, reason: str = "provider-error"):
        super().__init__(message)
        self.reason = reason


class SearchServiceError(LookoutError):
    """The instant-answer service failed or returned an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

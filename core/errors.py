from typing import Optional


class OddsPipelineError(Exception):
    """Base class for errors that abort an odds collection run."""


class ConfigError(OddsPipelineError):
    """Missing credential or invalid user-supplied option."""


class UpstreamError(OddsPipelineError):
    """Non-2xx response, transport failure, or unreadable body from the odds API."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        self.reason = reason
        if status is not None:
            message = f"{url} -> {status} {reason}".rstrip()
        else:
            message = f"{url} -> {reason}"
        super().__init__(message)


class DataShapeError(Exception):
    """An event payload has no usable head-to-head market.

    Never fatal: the extractor turns it into a dropped ExtractionResult.
    """

    def __init__(self, reason: str, detail: str = ""):
        self.reason = reason
        super().__init__(f"{reason}: {detail}" if detail else reason)

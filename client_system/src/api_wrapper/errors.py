"""
errors.py

Exceptions raised by the API wrapper. Unknown endpoint names are not in
here on purpose: they come back as an EndpointNotFound result instead.
"""

from typing import Optional


class APIWrapperError(Exception):
    """Base class for everything the wrapper raises."""


class ConfigError(APIWrapperError):
    """Endpoint configuration could not be parsed or validated."""


class TransportError(APIWrapperError):
    """The server answered with a non-success status other than 429."""

    def __init__(self, status_code: int, status_text: str, url: str = ""):
        self.status_code = status_code
        self.status_text = status_text
        self.url = url
        super().__init__(f"HTTP {status_code} {status_text} ({url})")


class RateLimitProtocolError(APIWrapperError):
    """A 429 response did not carry a usable Retry-After header."""

    def __init__(self, url: str = "", retry_after: Optional[str] = None):
        self.status_code = 429
        self.url = url
        self.retry_after = retry_after
        if retry_after is None:
            msg = f"429 without Retry-After header ({url})"
        else:
            msg = f"429 with unusable Retry-After {retry_after!r} ({url})"
        super().__init__(msg)


class RetryExhaustedError(APIWrapperError):
    """Still rate limited after the whole retry budget was spent."""

    def __init__(self, attempts: int, url: str = ""):
        self.attempts = attempts
        self.url = url
        super().__init__(
            f"Still rate limited after {attempts} attempts ({url})"
        )


class ResponseDecodeError(APIWrapperError):
    """A JSON response body could not be parsed (strict mode only)."""

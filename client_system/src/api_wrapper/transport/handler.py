"""
handler.py

Sends a RequestDescriptor through a transport and decodes the result.

Per call:
- success (2xx): decode by content type
- 429: wait Retry-After seconds (+ padding) and resend the same request,
    at most `max_retries` times; a 429 without Retry-After is an error
- any other status: TransportError, no retry

Decoding is lenient by default: a JSON content type with a malformed body
resolves to None instead of raising.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from ..data_structure.models import ExhaustionPolicy, RequestDescriptor
from ..errors import (
    RateLimitProtocolError,
    ResponseDecodeError,
    RetryExhaustedError,
    TransportError,
)
from .base import TransportFn, TransportResponse

logger = logging.getLogger(__name__)

RATE_LIMITED = 429
SleepFn = Callable[[float], Awaitable[Any]]


class TransportHandler:
    """Runs the send / retry / decode loop for one API."""

    def __init__(
        self,
        transport: TransportFn,
        *,
        max_retries: int = 5,
        retry_after_padding: float = 1.0,
        on_retry_exhausted: ExhaustionPolicy = "return_none",
        strict_json: bool = False,
        log_requests: bool = False,
        sleep: Optional[SleepFn] = None,
    ):
        if not isinstance(max_retries, int) or max_retries < 0:
            raise ValueError(
                f"max_retries must be a non-negative integer, got {max_retries}"
            )
        if retry_after_padding < 0:
            raise ValueError(
                f"retry_after_padding must be >= 0, got {retry_after_padding}"
            )
        self.transport = transport
        self.max_retries = max_retries
        self.retry_after_padding = retry_after_padding
        self.on_retry_exhausted = on_retry_exhausted
        self.strict_json = strict_json
        self.log_level = logging.INFO if log_requests else logging.DEBUG
        self._sleep = sleep or asyncio.sleep

    def _retry_delay(self, response: TransportResponse, url: str) -> float:
        """Seconds to wait before resending, from the Retry-After header."""
        ra: Optional[str] = response.headers.get("Retry-After")
        if ra is None or not ra.strip():
            raise RateLimitProtocolError(url=url)
        seconds = ra.strip()
        # whole non-negative seconds only; HTTP-date form is not supported
        if not (seconds.isascii() and seconds.isdigit()):
            raise RateLimitProtocolError(url=url, retry_after=ra)
        return int(seconds) + self.retry_after_padding

    def decode(self, response: TransportResponse) -> Any:
        """JSON when the content type says so, raw text otherwise."""
        content_type = response.headers.get("content-type") or ""
        if "application/json" not in content_type.lower():
            return response.text
        try:
            return response.json()
        except ValueError as e:
            if self.strict_json:
                raise ResponseDecodeError(f"Malformed JSON body: {e}") from e
            logger.warning(f"Malformed JSON body, resolving to None: {e}")
            return None

    async def execute(self, request: RequestDescriptor) -> Any:
        """
        Send `request`, retrying on 429 while the budget lasts.

        :return: decoded body; None when rate limiting outlasted the retry
            budget and the exhaustion policy is "return_none"
        :raises TransportError: non-success status other than 429
        :raises RateLimitProtocolError: 429 without usable Retry-After
        :raises RetryExhaustedError: budget spent and policy is "raise"
        """
        remaining = self.max_retries
        attempts = 0
        while True:
            attempts += 1
            logger.log(
                self.log_level,
                f"{request.method} {request.url} (attempt {attempts})"
            )
            response = await self.transport(request.url, request.options())

            if response.is_success:
                return self.decode(response)

            if response.status_code != RATE_LIMITED:
                raise TransportError(
                    response.status_code,
                    response.reason_phrase,
                    url=request.url,
                )

            delay = self._retry_delay(response, request.url)
            if remaining <= 0:
                break
            remaining -= 1
            logger.log(
                self.log_level,
                f"Rate limited on {request.url}; retrying in {delay:.1f}s "
                f"({remaining} retries left)"
            )
            await self._sleep(delay)

        if self.on_retry_exhausted == "raise":
            raise RetryExhaustedError(attempts, url=request.url)
        logger.warning(
            f"Giving up on {request.url} after {attempts} rate-limited attempts"
        )
        return None

"""
base.py

Transport capability used by the API wrapper.

A transport is any async callable `(url, options) -> response` where
`options` holds `method`, `headers`, an optional serialized `body`, and any
extra keys the caller spliced in. The response must expose the
httpx.Response surface the handler reads: `status_code`, `is_success`,
`reason_phrase`, `headers.get()`, `text`, `json()`.

Classes:
- Transport: abstract base for transports that own resources
- HttpxTransport: default transport backed by httpx.AsyncClient
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Protocol

import httpx

TIMEOUT = 30.0


class TransportResponse(Protocol):
    status_code: int
    headers: Mapping[str, str]

    @property
    def is_success(self) -> bool: ...

    @property
    def reason_phrase(self) -> str: ...

    @property
    def text(self) -> str: ...

    def json(self, **kwargs: Any) -> Any: ...


TransportFn = Callable[[str, Dict[str, Any]], Awaitable[TransportResponse]]


class Transport(ABC):
    """Abstract base class for transports with a lifecycle."""

    def __init__(self):
        super().__init__()

    @abstractmethod
    async def __call__(
        self,
        url: str,
        options: Dict[str, Any]
    ) -> TransportResponse:
        pass

    async def aclose(self) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class HttpxTransport(Transport):
    """
    Default transport. Owns its httpx.AsyncClient unless one is passed in,
    in which case closing is left to the caller.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        timeout: float = TIMEOUT,
    ):
        super().__init__()
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
        )

    async def __call__(
        self,
        url: str,
        options: Dict[str, Any]
    ) -> httpx.Response:
        opts = dict(options)
        method = opts.pop("method", "GET")
        headers = opts.pop("headers", None)
        body = opts.pop("body", None)
        # remaining keys are passed through to httpx (timeout, params, ...)
        return await self.client.request(
            method,
            url,
            headers=headers,
            content=body,
            **opts,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

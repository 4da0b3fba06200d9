"""
api.py

API facade: one bound coroutine per configured endpoint name.

    api = API(APIInfo(api_base_url="https://example.com/", endpoints=[...]))
    page = await api.getPage(params={"pageId": "abc"})
    page = await api["getPage"](params={"pageId": "abc"})
    page = await api.fetch_data(endpoint="getPage", params={"pageId": "abc"})

Calls resolve to the decoded response body, or to an EndpointNotFound
result when `fetch_data` is given an unregistered name.
"""

from __future__ import annotations
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from .config import get_default_log_requests, get_default_max_retries
from .data_structure.models import APIInfo, EndpointNotFound, ParamValue
from .request_builder import RequestBuilder
from .transport.base import HttpxTransport, TransportFn
from .transport.handler import SleepFn, TransportHandler

EndpointMethod = Callable[..., Awaitable[Any]]


class API:
    """Wraps one configured API. Safe to share between concurrent calls."""

    def __init__(
        self,
        info: APIInfo,
        *,
        transport: Optional[TransportFn] = None,
        sleep: Optional[SleepFn] = None,
    ):
        self.info = info
        self.builder = RequestBuilder.from_api_info(info)

        self._default_transport: Optional[HttpxTransport] = None
        if transport is None:
            self._default_transport = HttpxTransport()
            transport = self._default_transport

        max_retries = info.max_retries
        if max_retries is None:
            max_retries = get_default_max_retries()
        log_requests = info.log_requests
        if log_requests is None:
            log_requests = get_default_log_requests()

        self.handler = TransportHandler(
            transport,
            max_retries=max_retries,
            retry_after_padding=info.retry_after_padding,
            on_retry_exhausted=info.on_retry_exhausted,
            strict_json=info.strict_json,
            log_requests=log_requests,
            sleep=sleep,
        )
        self._methods: Dict[str, EndpointMethod] = {
            name: self._create_endpoint_method(name)
            for name in self.builder.endpoints
        }

    def _create_endpoint_method(self, endpoint_name: str) -> EndpointMethod:
        async def invoke(
            body: Any = None,
            params: Optional[Mapping[str, ParamValue]] = None,
            other: Optional[Mapping[str, Any]] = None,
        ) -> Any:
            return await self.fetch_data(
                endpoint=endpoint_name,
                body=body,
                params=params,
                other=other,
            )

        invoke.__name__ = endpoint_name
        invoke.__qualname__ = f"{type(self).__name__}.{endpoint_name}"
        return invoke

    @property
    def names(self) -> List[str]:
        return list(self._methods)

    def endpoint(self, name: str) -> EndpointMethod:
        """
        Bound invocation for `name`. Unknown names are not rejected here;
        calling the result resolves to EndpointNotFound.
        """
        return self._methods.get(name) or self._create_endpoint_method(name)

    def __getitem__(self, name: str) -> EndpointMethod:
        try:
            return self._methods[name]
        except KeyError:
            raise KeyError(f"No endpoint named {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._methods

    def __getattr__(self, name: str) -> EndpointMethod:
        # only reached when normal attribute lookup fails
        methods = self.__dict__.get("_methods") or {}
        if name in methods:
            return methods[name]
        raise AttributeError(
            f"{type(self).__name__!r} object has no attribute or endpoint {name!r}"
        )

    async def fetch_data(
        self,
        *,
        endpoint: str = "",
        body: Any = None,
        params: Optional[Mapping[str, ParamValue]] = None,
        other: Optional[Mapping[str, Any]] = None,
    ) -> Union[Any, EndpointNotFound]:
        request = self.builder.build(
            endpoint, body=body, params=params, other=other
        )
        if isinstance(request, EndpointNotFound):
            return request
        return await self.handler.execute(request)

    async def aclose(self) -> None:
        """Close the default transport, if this instance created it."""
        if self._default_transport is not None:
            await self._default_transport.aclose()

    async def __aenter__(self) -> "API":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

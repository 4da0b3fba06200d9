"""
request_builder.py

Endpoint registry and request builder.

Turns an endpoint name plus the caller's (optional) params/body into a
RequestDescriptor:
1. Path params: the caller's mapping is used as-is when given, otherwise
    the default-table params, otherwise the endpoint's own static params.
    There is no per-key merge.
2. Body: shallow merge of default body and caller body, caller keys win.
    Nested values from the caller replace same-named defaults entirely.
3. Path template: every `:key` token with a matching param is substituted,
    unknown tokens are kept verbatim.
4. Unknown endpoint names produce an EndpointNotFound result, not an error.
"""

from __future__ import annotations
import re
import json
import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional, Union

from .data_structure.models import (
    APIInfo,
    DefaultParamsEntry,
    Endpoint,
    EndpointNotFound,
    ParamValue,
    RequestDescriptor,
)

logger = logging.getLogger(__name__)

_EMPTY_DEFAULTS = DefaultParamsEntry()


def fill_path(template: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Substitute `:key` tokens in `template` with str(params[key]).
    Keys may be any string (`user-id`, `v.major`); a token only matches when
    it is not followed by further name characters, so `:id` leaves `:idx`
    alone. Single pass, so substituted values are never re-scanned.
    """
    values = {str(k): v for k, v in (params or {}).items() if str(k)}
    if not values:
        return template

    # longest first so `:user-id` wins over `:user`
    keys = sorted(values, key=len, reverse=True)
    pattern = re.compile(
        ":(" + "|".join(re.escape(k) for k in keys) + r")(?![A-Za-z0-9_-])"
    )
    return pattern.sub(lambda m: str(values[m.group(1)]), template)


class RequestBuilder:
    """Holds endpoint definitions and default tables for one API."""

    def __init__(
        self,
        endpoints: Iterable[Endpoint] = (),
        *,
        api_base_url: str = "",
        headers: Optional[Mapping[str, str]] = None,
        default_params: Optional[Mapping[str, DefaultParamsEntry]] = None,
    ):
        self.api_base_url = api_base_url
        self.headers: Dict[str, str] = dict(headers or {})
        self.default_params: Dict[str, DefaultParamsEntry] = dict(
            default_params or {}
        )
        self.endpoints: Dict[str, Endpoint] = {}
        self.register(endpoints)

    @classmethod
    def from_api_info(cls, info: APIInfo) -> "RequestBuilder":
        return cls(
            info.endpoints,
            api_base_url=info.api_base_url,
            headers=info.headers,
            default_params=info.default_params,
        )

    def register(self, endpoints: Iterable[Endpoint]) -> None:
        """Add endpoints to the name lookup. A repeated name replaces the old one."""
        for endpoint in endpoints:
            if endpoint.name in self.endpoints:
                logger.warning(
                    f"Endpoint {endpoint.name!r} registered twice; "
                    "keeping the last definition."
                )
            self.endpoints[endpoint.name] = endpoint

    def get(self, name: str) -> Optional[Endpoint]:
        return self.endpoints.get(name)

    def _defaults(self, name: str) -> DefaultParamsEntry:
        return self.default_params.get(name) or _EMPTY_DEFAULTS

    def resolve_params(
        self,
        name: str,
        caller_params: Optional[Mapping[str, ParamValue]] = None,
    ) -> Dict[str, ParamValue]:
        """All-or-nothing: caller params win outright when given (even `{}`)."""
        if caller_params is not None:
            return dict(caller_params)
        default = self._defaults(name).params
        if default is not None:
            return dict(default)
        endpoint = self.endpoints.get(name)
        if endpoint is not None and endpoint.params is not None:
            return dict(endpoint.params)
        return {}

    def _default_body(self, name: str) -> Any:
        default = self._defaults(name).body
        if default is not None:
            return default
        endpoint = self.endpoints.get(name)
        return endpoint.body if endpoint is not None else None

    def resolve_body(self, name: str, caller_body: Any = None) -> Any:
        """
        Shallow merge `{**default, **caller}`; None when neither exists.
        A non-mapping on either side cannot be merged, the caller's value
        (or the default, when the caller gave nothing) is used whole.
        """
        default = self._default_body(name)
        if caller_body is None and default is None:
            return None
        if caller_body is None:
            return dict(default) if isinstance(default, Mapping) else default
        if not isinstance(caller_body, Mapping):
            return caller_body
        merged: Dict[str, Any] = {}
        if isinstance(default, Mapping):
            merged.update(default)
        merged.update(caller_body)
        return merged

    def build(
        self,
        name: str,
        *,
        body: Any = None,
        params: Optional[Mapping[str, ParamValue]] = None,
        other: Optional[Mapping[str, Any]] = None,
    ) -> Union[RequestDescriptor, EndpointNotFound]:
        """Resolve a call into a RequestDescriptor (or EndpointNotFound)."""
        endpoint = self.endpoints.get(name)
        if endpoint is None:
            return EndpointNotFound(endpoint=name)

        path = fill_path(endpoint.path, self.resolve_params(name, params))
        extra: Dict[str, Any] = dict(other or {})
        headers = dict(self.headers)
        headers.update(extra.pop("headers", None) or {})
        # method and body always come from the endpoint definition
        extra.pop("method", None)
        extra.pop("body", None)

        serialized: Optional[str] = None
        if endpoint.method != "GET":
            request_body = self.resolve_body(name, body)
            if request_body is not None:
                serialized = json.dumps(request_body)
                if not any(k.lower() == "content-type" for k in headers):
                    headers["Content-Type"] = "application/json"

        return RequestDescriptor(
            url=f"{self.api_base_url}{path}",
            method=endpoint.method,
            headers=headers,
            body=serialized,
            extra=extra,
        )

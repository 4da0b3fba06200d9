"""
registry.py

Several independent APIs behind one dispatch entry point, keyed by API
name. Calls that omit the API name go to the default key.
"""

from __future__ import annotations
from typing import Any, Dict, Mapping, Optional

from .api import API
from .data_structure.models import APIInfo, ParamValue
from .transport.base import TransportFn
from .transport.handler import SleepFn

DEFAULT_KEY = "default"


class APIRegistry:

    def __init__(
        self,
        apis: Mapping[str, APIInfo],
        *,
        default_key: str = DEFAULT_KEY,
        transport: Optional[TransportFn] = None,
        sleep: Optional[SleepFn] = None,
    ):
        if not apis:
            raise ValueError("APIRegistry needs at least one API configuration")
        if default_key not in apis:
            raise ValueError(
                f"Default API {default_key!r} is not configured; "
                f"available: {sorted(apis)}"
            )
        self.default_key = default_key
        self.apis: Dict[str, API] = {
            name: API(info, transport=transport, sleep=sleep)
            for name, info in apis.items()
        }

    def get(self, api: Optional[str] = None) -> API:
        key = self.default_key if api is None else api
        try:
            return self.apis[key]
        except KeyError:
            raise KeyError(f"No API named {key!r}") from None

    async def fetch_data(
        self,
        endpoint: str,
        *,
        api: Optional[str] = None,
        body: Any = None,
        params: Optional[Mapping[str, ParamValue]] = None,
        other: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        return await self.get(api).fetch_data(
            endpoint=endpoint, body=body, params=params, other=other
        )

    async def aclose(self) -> None:
        for wrapped in self.apis.values():
            await wrapped.aclose()

    async def __aenter__(self) -> "APIRegistry":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

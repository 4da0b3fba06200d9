"""
models.py

Pydantic models describing an API to wrap and the per-call request that is
built from it. The field aliases accept the camelCase keys used by
hand-written endpoint configuration files (apiBaseUrl, defaultParams, ...).

Classes:
- Endpoint: a named, templated HTTP route with a fixed method
- DefaultParamsEntry: per-endpoint fallback params/body
- APIInfo: everything needed to build an API wrapper
- RequestDescriptor: a fully resolved request, built fresh for every call
- EndpointNotFound: tagged result returned for unknown endpoint names
"""

from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]
ParamValue = Union[str, int, float]
ExhaustionPolicy = Literal["return_none", "raise"]


class Endpoint(BaseModel):
    """
    One entry of the endpoint list. Immutable once registered.
    `path` may contain `:name` placeholders filled from path params.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    method: HttpMethod = "GET"
    body: Optional[Any] = None
    params: Optional[Dict[str, ParamValue]] = None # static path params

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class DefaultParamsEntry(BaseModel):
    """Fallback values, used only when the caller omits the argument."""
    model_config = ConfigDict(frozen=True)

    params: Optional[Dict[str, ParamValue]] = None
    body: Optional[Any] = None


class APIInfo(BaseModel):
    """
    Configuration for one wrapped API.
    `max_retries=None` defers to the configured default
    (see api_wrapper.config.get_default_max_retries).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_base_url: str = Field("", alias="apiBaseUrl")
    headers: Dict[str, str] = Field(default_factory=dict)
    endpoints: List[Endpoint] = Field(default_factory=list)
    default_params: Dict[str, DefaultParamsEntry] = Field(
        default_factory=dict, alias="defaultParams"
    )
    log_requests: Optional[bool] = Field(None, alias="logging")
    max_retries: Optional[int] = Field(None, alias="retries", ge=0)
    retry_after_padding: float = Field(1.0, alias="retryAfterPadding", ge=0)
    on_retry_exhausted: ExhaustionPolicy = Field(
        "return_none", alias="onRetryExhausted"
    )
    strict_json: bool = Field(False, alias="strictJson")


class RequestDescriptor(BaseModel):
    """
    A ready-to-send request. Resent unchanged on every retry.
    `body` is the serialized JSON payload, or None when nothing is sent.
    """
    model_config = ConfigDict(frozen=True)

    url: str
    method: HttpMethod
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None
    extra: Dict[str, Any] = Field(default_factory=dict)

    def options(self) -> Dict[str, Any]:
        """Options mapping handed to the transport callable."""
        opts: Dict[str, Any] = dict(self.extra)
        opts["method"] = self.method
        opts["headers"] = dict(self.headers)
        if self.body is not None:
            opts["body"] = self.body
        return opts


class EndpointNotFound(BaseModel):
    """Returned (never raised) when a call names an unregistered endpoint."""
    model_config = ConfigDict(frozen=True)

    error: Literal["endpoint not found"] = "endpoint not found"
    endpoint: str

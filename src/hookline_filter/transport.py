from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol, Tuple

import httpx

from hookline_common.settings import get_settings

RawResponse = Tuple[int, Mapping[str, str], str]


class Transport(Protocol):
    """Anything that can perform one HTTP request and report the response."""

    def __call__(
        self, method: str, url: str, options: Dict[str, Any]
    ) -> RawResponse: ...


class HttpxTransport:
    """Performs requests with a shared httpx.Client."""

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        settings = get_settings()
        self._timeout = timeout_seconds or settings.timeout_seconds
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=self._timeout,
            headers={"user-agent": settings.user_agent},
        )

    def __call__(self, method: str, url: str, options: Dict[str, Any]) -> RawResponse:
        return self.perform_request(method, url, options)

    def perform_request(
        self, method: str, url: str, options: Dict[str, Any]
    ) -> RawResponse:
        body = options.get("body")
        resp = self._client.request(
            method.upper(),
            url,
            headers=options.get("headers") or None,
            params=options.get("query") or None,
            content=body.encode("utf-8") if isinstance(body, str) else body,
        )
        return resp.status_code, dict(resp.headers), resp.text

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

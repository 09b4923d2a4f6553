"""
HTTP enrichment filter.

For every event: render the configured request from event fields, perform it
once, decode the response and write it (or the fallback, or failure tags) back
into the event.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional

from hookline_common.logging import setup_logging
from hookline_filter.events import Event
from hookline_filter.mutate import EventMutator
from hookline_filter.options import FilterConfig
from hookline_filter.request import RequestSpec, build_request
from hookline_filter.response import (
    DecodeResult,
    Outcome,
    ResponseOutcome,
    TransportFailure,
    decode,
)
from hookline_filter.transport import HttpxTransport, Transport

log = setup_logging("hookline.filter")


class HttpFilter:
    """
    Enriches events with the result of an HTTP request.

    `options` is a mapping of filter options (see FilterConfig) and is
    validated here; invalid options raise ConfigurationError. `transport`
    defaults to an HttpxTransport owned by the filter.
    """

    def __init__(self, options: Any, transport: Optional[Transport] = None) -> None:
        self.config = FilterConfig.from_options(options)
        self._mutator = EventMutator.from_config(self.config)
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(
            timeout_seconds=self.config.timeout_seconds
        )

    def filter(self, event: Event) -> Event:
        spec = build_request(self.config, event)
        outcome = self._request(spec)
        result = decode(outcome, spec.method)
        if result.failed:
            self._log_failure(spec, result)
        headers = outcome.headers if isinstance(outcome, ResponseOutcome) else None
        return self._mutator.apply(event, result, headers)

    def filter_many(self, events: Iterable[Event]) -> Iterator[Event]:
        for event in events:
            yield self.filter(event)

    def _request(self, spec: RequestSpec) -> Outcome:
        try:
            status, headers, body = self._transport(
                spec.method, spec.url, spec.options()
            )
        except Exception as e:
            return TransportFailure(reason=f"{type(e).__name__}: {e}")
        return ResponseOutcome(
            status=int(status),
            headers=dict(headers or {}),
            body="" if body is None else str(body),
        )

    def _log_failure(self, spec: RequestSpec, result: DecodeResult) -> None:
        log.warning(
            "http_request_failed method=%s url=%s reason=%s fallback=%s",
            spec.method,
            spec.url,
            result.reason,
            self.config.fallback is not None,
        )

    def close(self) -> None:
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            self._transport.close()

    def __enter__(self) -> "HttpFilter":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

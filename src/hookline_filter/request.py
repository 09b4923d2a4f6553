from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from hookline_filter.events import Event
from hookline_filter.interpolate import render, stringify
from hookline_filter.options import BodyFormat, FilterConfig


@dataclass(frozen=True)
class RequestSpec:
    """A fully rendered outbound request for one event."""

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    query: Optional[Dict[str, Any]] = None
    body: Optional[str] = None

    @property
    def content_type(self) -> Optional[str]:
        return _find_header(self.headers, "content-type")

    def options(self) -> Dict[str, Any]:
        """Options mapping handed to the transport alongside method and url."""
        opts: Dict[str, Any] = {"headers": dict(self.headers)}
        if self.query is not None:
            opts["query"] = self.query
        if self.body is not None:
            opts["body"] = self.body
        return opts


def _find_header(headers: Dict[str, str], name: str) -> Optional[str]:
    wanted = name.lower()
    for k, v in headers.items():
        if k.lower() == wanted:
            return v
    return None


def _render_body(config: FilterConfig, event: Event) -> Optional[str]:
    if config.body is None:
        return None
    rendered = render(config.body, event)
    if config.body_format is BodyFormat.json:
        return json.dumps(rendered, separators=(",", ":"), ensure_ascii=False)
    return stringify(rendered)


def build_request(config: FilterConfig, event: Event) -> RequestSpec:
    """Render url, headers, query and body of the configured request for an event."""
    url = stringify(render(config.url, event))

    headers: Dict[str, str] = {}
    for name, template in config.headers.items():
        headers[name] = stringify(render(template, event))

    body = _render_body(config, event)
    if body is not None and _find_header(headers, "content-type") is None:
        headers["content-type"] = config.body_format.content_type

    query = render(config.query, event) if config.query is not None else None

    return RequestSpec(
        method=config.verb.value,
        url=url,
        headers=headers,
        query=query,
        body=body,
    )

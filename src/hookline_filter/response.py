from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True)
class ResponseOutcome:
    """What came back from the transport for one request."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status <= 299

    def header(self, name: str) -> Optional[str]:
        wanted = name.lower()
        for k, v in self.headers.items():
            if str(k).lower() == wanted:
                return v
        return None


@dataclass(frozen=True)
class TransportFailure:
    """The transport raised before a response was available."""

    reason: str


Outcome = Union[ResponseOutcome, TransportFailure]


@dataclass(frozen=True)
class DecodeResult:
    value: Any = None
    failed: bool = False
    reason: Optional[str] = None


def is_json_response(outcome: ResponseOutcome) -> bool:
    ctype = outcome.header("content-type")
    if isinstance(ctype, (list, tuple)):
        ctype = ",".join(str(c) for c in ctype)
    return bool(ctype) and "application/json" in str(ctype).lower()


def decode(outcome: Outcome, method: Optional[str] = None) -> DecodeResult:
    """
    Turn a transport outcome into the value to store, or a failure.

    A successful HEAD response has no body to parse; its raw (empty) body is
    returned whatever the content type says.

    Never raises: every problem becomes failed=True with a reason.
    """
    if isinstance(outcome, TransportFailure):
        return DecodeResult(failed=True, reason=f"transport_error: {outcome.reason}")

    if not outcome.ok:
        return DecodeResult(failed=True, reason=f"http_status_{outcome.status}")

    if method == "head" or not is_json_response(outcome):
        return DecodeResult(value=outcome.body)

    try:
        return DecodeResult(value=json.loads(outcome.body))
    except (TypeError, ValueError) as exc:
        return DecodeResult(failed=True, reason=f"json_parse_error: {exc}")

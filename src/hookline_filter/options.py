"""
Options accepted by the HTTP enrichment filter.

Options are validated once, when the filter is constructed. Anything wrong
here raises ConfigurationError before a single event is processed.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from hookline_common.errors import ConfigurationError
from hookline_filter.paths import FieldPath, parse

REQUEST_FAILURE_TAG = "_httprequestfailure"


class Verb(str, Enum):
    get = "get"
    head = "head"
    post = "post"
    delete = "delete"


class BodyFormat(str, Enum):
    json = "json"
    text = "text"

    @property
    def content_type(self) -> str:
        return "application/json" if self is BodyFormat.json else "text/plain"


class FilterConfig(BaseModel):
    """
    Options:
      - url: str template (required)
      - verb | method: get|head|post|delete (default get, case-insensitive)
      - headers: mapping of header name -> template
      - query: mapping of parameter name -> template
      - body: template (mapping, sequence or string)
      - body_format: json|text (default json)
      - target_body | target: field reference for the response body (required)
      - target_headers: field reference for the response headers
      - fallback: mapping written to the target when the request fails
      - tag_on_request_failure: tags added when the request fails without fallback
      - timeout_seconds: transport timeout
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    url: str
    verb: Verb = Field(Verb.get, validation_alias=AliasChoices("verb", "method"))
    headers: Dict[str, Any] = Field(default_factory=dict)
    query: Optional[Dict[str, Any]] = None
    body: Any = None
    body_format: BodyFormat = BodyFormat.json
    target_body: str = Field(validation_alias=AliasChoices("target_body", "target"))
    target_headers: Optional[str] = None
    fallback: Optional[Dict[str, Any]] = None
    tag_on_request_failure: List[str] = Field(
        default_factory=lambda: [REQUEST_FAILURE_TAG]
    )
    timeout_seconds: Optional[float] = Field(None, gt=0)

    @field_validator("url")
    @classmethod
    def _url_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("url must not be empty")
        return v.strip()

    @field_validator("verb", "body_format", mode="before")
    @classmethod
    def _lowercase(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("target_body")
    @classmethod
    def _target_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("target_body must not be empty")
        parse(v)
        return v.strip()

    @field_validator("target_headers")
    @classmethod
    def _target_headers_path(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("target_headers must not be empty when set")
        parse(v)
        return v.strip()

    @field_validator("tag_on_request_failure", mode="before")
    @classmethod
    def _tags_as_list(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v

    @model_validator(mode="after")
    def _text_body_is_text(self) -> "FilterConfig":
        if self.body_format is BodyFormat.text and isinstance(
            self.body, (Mapping, list)
        ):
            raise ValueError("body must be a string when body_format is text")
        return self

    @model_validator(mode="after")
    def _targets_disjoint(self) -> "FilterConfig":
        if self.target_headers and parse(self.target_headers).overlaps(
            parse(self.target_body)
        ):
            raise ValueError("target_headers must not overlap target_body")
        return self

    @property
    def target(self) -> FieldPath:
        return parse(self.target_body)

    @property
    def headers_target(self) -> Optional[FieldPath]:
        return parse(self.target_headers) if self.target_headers else None

    @classmethod
    def from_options(cls, options: Any) -> "FilterConfig":
        """Validate raw options, raising ConfigurationError on any problem."""
        if isinstance(options, FilterConfig):
            return options
        if not isinstance(options, Mapping):
            raise ConfigurationError("filter options must be a mapping")
        try:
            return cls.model_validate(dict(options))
        except ValidationError as exc:
            raise ConfigurationError(_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "options"
        problems.append(f"{loc}: {err.get('msg')}")
    return "invalid filter options: " + "; ".join(problems)

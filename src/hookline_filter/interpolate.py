"""
Field-reference interpolation for filter option templates.

A template is any option value: string, mapping, sequence or scalar.
Strings may carry ``%{path}`` placeholders that are resolved against an
event. A string that is exactly one placeholder yields the referenced value
unchanged (numbers stay numbers, objects stay objects). Placeholders embedded
in other text are replaced by the text form of the value, see ``stringify``.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Mapping

from hookline_common.errors import FieldPathError
from hookline_filter.events import Event
from hookline_filter.paths import parse

PLACEHOLDER = re.compile(r"%\{([^{}]+)\}")

# Text form of a missing field or a null value inside a larger string.
MISSING_TEXT = "nil"


def stringify(value: Any) -> str:
    """Text form of a value substituted into a string template."""
    if value is None:
        return MISSING_TEXT
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)


def has_placeholders(template: Any) -> bool:
    """True when the template holds at least one placeholder anywhere."""
    if isinstance(template, str):
        return PLACEHOLDER.search(template) is not None
    if isinstance(template, Mapping):
        return any(has_placeholders(k) or has_placeholders(v) for k, v in template.items())
    if isinstance(template, (list, tuple)):
        return any(has_placeholders(v) for v in template)
    return False


def _resolve(reference: str, event: Event) -> Any:
    try:
        path = parse(reference)
    except FieldPathError:
        return None
    return event.get(path)


def render_string(template: str, event: Event) -> Any:
    matches = list(PLACEHOLDER.finditer(template))
    if not matches:
        return template

    if len(matches) == 1 and matches[0].span() == (0, len(template)):
        return _resolve(matches[0].group(1), event)

    return PLACEHOLDER.sub(lambda m: stringify(_resolve(m.group(1), event)), template)


def render(template: Any, event: Event) -> Any:
    """
    Render a template against an event, returning a structurally identical
    value with placeholders substituted. The event is only read.
    """
    if isinstance(template, str):
        return render_string(template, event)

    if isinstance(template, Mapping):
        out: Dict[Any, Any] = {}
        for key, value in template.items():
            if isinstance(key, str):
                key = render_string(key, event)
                if not isinstance(key, str):
                    key = stringify(key)
            out[key] = render(value, event)
        return out

    if isinstance(template, (list, tuple)):
        items: List[Any] = [render(v, event) for v in template]
        return items

    return template

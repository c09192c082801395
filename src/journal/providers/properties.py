"""
Typed reading of Notion page properties.

A property value comes from one of a few source kinds (a plain number, a
formula result, a rollup result, a select, ...). `classify()` tags the raw
payload with its kind and the `extract_*` helpers handle every kind
explicitly. Anything missing or of an unsupported shape yields None; nothing
is defaulted to 0.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from src.utils.helpers import parse_float


class PropertyKind(str, Enum):
    NUMBER = "number"
    FORMULA = "formula"
    ROLLUP = "rollup"
    SELECT = "select"
    STATUS = "status"
    DATE = "date"
    TITLE = "title"
    RICH_TEXT = "rich_text"


@dataclass(frozen=True)
class PropertyValue:
    kind: PropertyKind
    payload: Any


def classify(prop: Any) -> Optional[PropertyValue]:
    if not isinstance(prop, dict):
        return None
    declared = prop.get("type")
    if declared is not None:
        try:
            kind = PropertyKind(declared)
        except ValueError:
            return None
        return PropertyValue(kind, prop.get(kind.value))
    # Older payloads omit "type"; use the first known key present.
    for kind in PropertyKind:
        if kind.value in prop:
            return PropertyValue(kind, prop[kind.value])
    return None


def _result_number(result: Any) -> Optional[float]:
    """Number out of a formula/rollup result object."""
    if not isinstance(result, dict):
        return None
    rtype = result.get("type", "number")
    if rtype == "number":
        return parse_float(result.get("number"))
    return None


def _plain_text(parts: Any) -> Optional[str]:
    if not isinstance(parts, list):
        return None
    text = "".join(
        (p.get("plain_text") or (p.get("text") or {}).get("content") or "")
        for p in parts
        if isinstance(p, dict)
    ).strip()
    return text or None


def extract_number(prop: Any) -> Optional[float]:
    value = classify(prop)
    if value is None:
        return None
    if value.kind is PropertyKind.NUMBER:
        return parse_float(value.payload)
    if value.kind in (PropertyKind.FORMULA, PropertyKind.ROLLUP):
        return _result_number(value.payload)
    if value.kind in (PropertyKind.TITLE, PropertyKind.RICH_TEXT):
        return parse_float(_plain_text(value.payload))
    if value.kind in (PropertyKind.SELECT, PropertyKind.STATUS, PropertyKind.DATE):
        return None
    raise AssertionError(f"unhandled property kind {value.kind}")


def extract_text(prop: Any) -> Optional[str]:
    value = classify(prop)
    if value is None:
        return None
    if value.kind in (PropertyKind.SELECT, PropertyKind.STATUS):
        payload = value.payload
        if isinstance(payload, dict):
            name = payload.get("name")
            return (name.strip() or None) if isinstance(name, str) else None
        return None
    if value.kind in (PropertyKind.TITLE, PropertyKind.RICH_TEXT):
        return _plain_text(value.payload)
    if value.kind is PropertyKind.FORMULA:
        payload = value.payload
        if isinstance(payload, dict) and payload.get("type") == "string":
            s = payload.get("string")
            return (s.strip() or None) if isinstance(s, str) else None
        return None
    if value.kind in (PropertyKind.NUMBER, PropertyKind.ROLLUP, PropertyKind.DATE):
        return None
    raise AssertionError(f"unhandled property kind {value.kind}")


def extract_date_start(prop: Any) -> Optional[str]:
    """ISO start string of a date (or date-typed formula) property."""
    value = classify(prop)
    if value is None:
        return None
    payload: Any = value.payload
    if value.kind is PropertyKind.FORMULA:
        if not isinstance(payload, dict) or payload.get("type") != "date":
            return None
        payload = payload.get("date")
    elif value.kind is not PropertyKind.DATE:
        return None
    if not isinstance(payload, dict):
        return None
    start = payload.get("start")
    return start if isinstance(start, str) and start else None


def page_properties(page: Any) -> Dict[str, Any]:
    if not isinstance(page, dict):
        return {}
    props = page.get("properties")
    return props if isinstance(props, dict) else {}

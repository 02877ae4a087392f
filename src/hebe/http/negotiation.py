"""
Content negotiation for the request agent.

``send_*`` merge body content into a PendingRequest and ``query_*`` merge
query content. Both try structured interpretations first and fall back in
a fixed order, so the same call accepts JSON fragments, form fragments and
opaque text.

Copyright (c) 2025 Hebe contributors.
"""

import dataclasses
import json
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote_plus

from hebe.http.errors import (
    MarshalError,
    QueryError,
    UnsupportedContentError,
)
from hebe.http.models import ContentType, PendingRequest

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_urlencoded(content: str, require_pairs: bool = False) -> dict[str, list[str]]:
    """Parse ``key=value&key2=value2`` into an ordered multimap.

    Semicolons are rejected as separators, as are malformed percent escapes.
    With ``require_pairs`` every segment must be ``key=value`` with a
    non-empty key, which keeps free text from passing as a form body.

    Raises:
        ValueError: content is not a valid urlencoded string
    """
    values: dict[str, list[str]] = {}
    for segment in content.split("&"):
        if not segment:
            continue
        if ";" in segment:
            raise ValueError(f"invalid semicolon separator in {segment!r}")
        if _BAD_ESCAPE.search(segment):
            raise ValueError(f"invalid URL escape in {segment!r}")

        key, sep, value = segment.partition("=")
        if require_pairs and (not sep or not key):
            raise ValueError(f"not a key=value pair: {segment!r}")

        values.setdefault(unquote_plus(key), []).append(unquote_plus(value))
    return values


def is_record(content: Any) -> bool:
    """True for mappings and dataclass instances."""
    if isinstance(content, Mapping):
        return True
    return dataclasses.is_dataclass(content) and not isinstance(content, type)


def to_json_mapping(content: Any) -> dict[str, Any]:
    """Convert a record to the mapping its JSON serialization describes.

    Raises:
        MarshalError: content cannot be serialized or is not an object
    """
    if dataclasses.is_dataclass(content) and not isinstance(content, type):
        content = dataclasses.asdict(content)
    try:
        value = json.loads(json.dumps(content))
    except (TypeError, ValueError) as e:
        raise MarshalError(f"cannot serialize {type(content).__name__}: {e}") from e
    if not isinstance(value, dict):
        raise MarshalError(f"{type(content).__name__} does not serialize to a JSON object")
    return value


# Body negotiation

def send_list(pending: PendingRequest, items: list[Any] | tuple[Any, ...]) -> None:
    """Append items to the list body, which is sent as one JSON array.

    Items that cannot be serialized record a MarshalError and none of them
    are added.
    """
    items = list(items)
    try:
        json.dumps(items)
    except (TypeError, ValueError) as e:
        pending.errors.append(MarshalError(f"cannot serialize list body: {e}"))
        return
    pending.list_body.extend(items)


def send_object(pending: PendingRequest, content: Any) -> None:
    """Merge a record's fields into the structured body, overwriting."""
    try:
        fields = to_json_mapping(content)
    except MarshalError as e:
        pending.errors.append(e)
        return
    pending.structured_body.update(fields)


def send_string(pending: PendingRequest, content: str) -> None:
    """Merge a string into the body.

    Tried in order: a JSON object (merged), a JSON array (appended to the
    list body), a urlencoded form (merged, switches the target type to
    form). Anything else switches the request to raw-string mode for good.
    The string is always appended to the raw body as well.
    """
    if not pending.is_raw_string:
        try:
            value = json.loads(content)
        except ValueError:
            value = None
            parsed_json = False
        else:
            parsed_json = True

        if parsed_json and isinstance(value, dict):
            pending.structured_body.update(value)
        elif parsed_json and isinstance(value, list):
            send_list(pending, value)
        else:
            try:
                form = parse_urlencoded(content, require_pairs=True)
            except ValueError:
                pending.engage_raw_string()
            else:
                _merge_form(pending, form)
                pending.target_type = ContentType.FORM

    pending.raw_body += content


def _merge_form(pending: PendingRequest, form: dict[str, list[str]]) -> None:
    # A repeated key becomes a list with the newest value first
    for key, values in form.items():
        new_value = values[0]
        if key in pending.structured_body:
            merged = [new_value]
            old_value = pending.structured_body[key]
            if isinstance(old_value, list):
                merged.extend(v for v in old_value if isinstance(v, str))
            elif isinstance(old_value, str):
                merged.append(old_value)
            pending.structured_body[key] = merged
        else:
            pending.structured_body[key] = new_value


def send(pending: PendingRequest, content: Any) -> None:
    """Classify content and merge it with the matching ``send_*``."""
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            pending.errors.append(UnsupportedContentError(f"body bytes are not UTF-8: {e}"))
            return

    if isinstance(content, str):
        send_string(pending, content)
    elif isinstance(content, (list, tuple)):
        send_list(pending, content)
    elif is_record(content):
        send_object(pending, content)
    else:
        pending.errors.append(
            UnsupportedContentError(f"cannot send content of type {type(content).__name__}")
        )


# Query negotiation

def _add_query_fields(pending: PendingRequest, fields: dict[str, Any], lower_keys: bool) -> None:
    for key, value in fields.items():
        if not isinstance(value, str):
            pending.errors.append(
                QueryError(f"query field {key!r} must be a string, got {type(value).__name__}")
            )
            continue
        pending.query.append((key.lower() if lower_keys else key, value))


def query_object(pending: PendingRequest, content: Any) -> None:
    """Flatten a record into query parameters with lower-cased keys."""
    try:
        fields = to_json_mapping(content)
    except MarshalError as e:
        pending.errors.append(QueryError(str(e)))
        return
    _add_query_fields(pending, fields, lower_keys=True)


def query_string(pending: PendingRequest, content: str) -> None:
    """Add query parameters from a JSON object string or a query string.

    For a query string only the first value of each key is kept.
    """
    try:
        value = json.loads(content)
    except ValueError:
        value = None

    if isinstance(value, dict):
        _add_query_fields(pending, value, lower_keys=False)
        return

    try:
        parsed = parse_urlencoded(content)
    except ValueError as e:
        pending.errors.append(QueryError(str(e)))
        return
    for key, values in parsed.items():
        pending.query.append((key, values[0]))


def query(pending: PendingRequest, content: Any) -> None:
    """Classify query content and merge it."""
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")

    if isinstance(content, str):
        query_string(pending, content)
    elif is_record(content):
        query_object(pending, content)
    else:
        pending.errors.append(
            QueryError(f"cannot build a query from {type(content).__name__}")
        )

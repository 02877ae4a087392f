"""
Turns a finished PendingRequest into an ``httpx.Request``.

The body is resolved to exactly one wire representation here. Precedence:
an explicit ``set_type``, then a recognized Content-Type header, then the
target type negotiated by ``send`` (json unless a form body was seen).
"""

import base64
import json
from typing import Any
from urllib.parse import urlencode

import httpx

from hebe.http.errors import NoMethodError
from hebe.http.models import (
    BODY_METHODS,
    ContentType,
    PendingRequest,
    content_type_for_mime,
)


def resolve_content_type(pending: PendingRequest) -> ContentType:
    """Effective content type of the outbound body."""
    if pending.forced_type is not None:
        return pending.forced_type

    for name, value in pending.headers.items():
        if name.lower() == "content-type":
            content_type = content_type_for_mime(value)
            if content_type is not None:
                return content_type

    return pending.target_type


def form_pairs(data: dict[str, Any]) -> list[tuple[str, str]]:
    """Flatten a structured body into form pairs.

    Strings are sent once, lists once per element, numbers as decimal
    text. Other values have no form representation and are skipped.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in data.items():
        values = value if isinstance(value, list) else [value]
        for item in values:
            if isinstance(item, str):
                pairs.append((key, item))
            elif isinstance(item, (int, float)) and not isinstance(item, bool):
                pairs.append((key, json.dumps(item)))
    return pairs


def _dump_json(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def encode_body(pending: PendingRequest, content_type: ContentType) -> bytes:
    """Encode the pending body for the given content type."""
    raw = pending.raw_body.encode("utf-8")

    if content_type is ContentType.JSON:
        if pending.is_raw_string:
            return raw
        if pending.structured_body:
            return _dump_json(pending.structured_body)
        if pending.list_body:
            return _dump_json(pending.list_body)
        return b""

    if content_type is ContentType.FORM:
        if pending.is_raw_string or pending.list_body:
            return raw
        return urlencode(form_pairs(pending.structured_body)).encode("ascii")

    # text, xml and html go out verbatim
    return raw


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def merge_query(url: httpx.URL, query: list[tuple[str, str]]) -> httpx.URL:
    """Add query pairs to whatever query string the URL already carries."""
    if not query:
        return url
    pairs = list(url.params.multi_items()) + list(query)
    return url.copy_with(params=pairs)


def make_request(pending: PendingRequest) -> httpx.Request:
    """Build the outbound request.

    Mixed structured and list bodies cannot be one JSON value, so they
    push the request into raw-string mode first.

    Raises:
        NoMethodError: no verb was set
        httpx.InvalidURL: the URL cannot be parsed
    """
    if not pending.method:
        raise NoMethodError("No method specified")

    if pending.structured_body and pending.list_body:
        pending.engage_raw_string()

    method = pending.method.upper()
    headers = httpx.Headers()
    content: bytes | None = None

    if method in BODY_METHODS or pending.has_body_content:
        content_type = resolve_content_type(pending)
        content = encode_body(pending, content_type)
        headers["Content-Type"] = content_type.mime_type

    for name, value in pending.headers.items():
        headers[name] = value

    url = merge_query(httpx.URL(pending.url), pending.query)

    if pending.basic_auth is not None:
        headers["Authorization"] = basic_auth_header(
            pending.basic_auth.username, pending.basic_auth.password
        )

    if pending.cookies:
        cookie_header = "; ".join(str(cookie) for cookie in pending.cookies)
        if "Cookie" in headers:
            cookie_header = f"{headers['Cookie']}; {cookie_header}"
        headers["Cookie"] = cookie_header

    return httpx.Request(method, url, headers=headers, content=content)

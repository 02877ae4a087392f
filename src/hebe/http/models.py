"""
Data model for pending requests.

Copyright (c) 2025 Hebe contributors.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

import httpx


class Method(str, Enum):
    """HTTP methods with named verb helpers on the agent."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


# Methods that always carry a body and a Content-Type
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class ContentType(str, Enum):
    """Serialization format of the outbound body."""
    JSON = "json"
    FORM = "form"
    TEXT = "text"
    XML = "xml"
    HTML = "html"

    @property
    def mime_type(self) -> str:
        return MIME_TYPES[self]


MIME_TYPES = {
    ContentType.JSON: "application/json",
    ContentType.FORM: "application/x-www-form-urlencoded",
    ContentType.TEXT: "text/plain",
    ContentType.XML: "application/xml",
    ContentType.HTML: "text/html",
}

# Aliases accepted by Agent.set_type()
TYPE_ALIASES = {
    "html": ContentType.HTML,
    "json": ContentType.JSON,
    "xml": ContentType.XML,
    "text": ContentType.TEXT,
    "urlencoded": ContentType.FORM,
    "form": ContentType.FORM,
    "form-data": ContentType.FORM,
}


def content_type_for_mime(value: str) -> ContentType | None:
    """Map a Content-Type header value to a ContentType, ignoring parameters."""
    media_type = value.split(";", 1)[0].strip().lower()
    for content_type, mime in MIME_TYPES.items():
        if mime == media_type:
            return content_type
    return None


class BodyMode(str, Enum):
    """How the body is interpreted. Only moves STRUCTURED -> RAW_STRING."""
    STRUCTURED = "structured"
    RAW_STRING = "raw_string"


@dataclass(frozen=True)
class BasicAuth:
    """Basic auth credentials."""
    username: str
    password: str


@dataclass(frozen=True)
class Cookie:
    """A request cookie."""
    name: str
    value: str

    def __str__(self) -> str:
        return f"{self.name}={self.value}"


@dataclass
class PendingRequest:
    """Everything known about the request being built."""
    method: str = ""
    url: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    query: list[tuple[str, str]] = field(default_factory=list)

    # Competing body representations
    structured_body: dict[str, Any] = field(default_factory=dict)
    list_body: list[Any] = field(default_factory=list)
    raw_body: str = ""
    body_mode: BodyMode = BodyMode.STRUCTURED

    target_type: ContentType = ContentType.JSON
    forced_type: ContentType | None = None

    basic_auth: BasicAuth | None = None
    cookies: list[Cookie] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)

    @property
    def is_raw_string(self) -> bool:
        return self.body_mode is BodyMode.RAW_STRING

    def engage_raw_string(self) -> None:
        """Switch to raw-string mode for the rest of this request's life."""
        self.body_mode = BodyMode.RAW_STRING

    @property
    def has_body_content(self) -> bool:
        return bool(self.structured_body or self.list_body or self.raw_body)


class AgentResult(NamedTuple):
    """Outcome of a dispatch: ``resp, body, errs = agent.get(url).end()``."""
    response: httpx.Response | None
    body: Any
    errors: list[Exception]

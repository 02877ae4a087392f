"""
Chainable HTTP request agent.

Provides a fluent request builder with:
- JSON, form and raw text bodies merged across chained calls
- Query parameters from mappings, dataclasses, JSON or query strings
- Basic auth and cookies
- Shared transport settings (timeout, proxy, TLS, redirect policy)
- Error accumulation instead of exceptions while building

Copyright (c) 2025 Hebe contributors.
"""

from hebe.http.agent import Agent
from hebe.http.client import ClientSettings, HTTPClient
from hebe.http.errors import AgentError, RedirectError
from hebe.http.models import (
    AgentResult,
    BodyMode,
    ContentType,
    Cookie,
    Method,
    PendingRequest,
)

__all__ = [
    "Agent",
    "AgentError",
    "AgentResult",
    "BodyMode",
    "ClientSettings",
    "ContentType",
    "Cookie",
    "HTTPClient",
    "Method",
    "PendingRequest",
    "RedirectError",
]

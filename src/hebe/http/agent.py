"""
Chainable HTTP request agent.

Every builder method returns the agent so calls compose:

    resp, body, errs = (
        Agent()
        .post("http://localhost:9200/books/_search")
        .set_type("json")
        .send('{"query": {"match_all": {}}}')
        .end()
    )

Builder methods never raise and never touch the network. Problems are
recorded on the pending request and handed back by ``end()``, which only
goes to the network when nothing was recorded.

Copyright (c) 2025 Hebe contributors.
"""

import logging
import ssl
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Iterable

import httpx

from hebe.http import negotiation
from hebe.http.client import HTTPClient, RedirectPolicy
from hebe.http.dump import format_curl, render_request, render_response
from hebe.http.errors import AgentError, ContentTypeError, RedirectError
from hebe.http.materialize import make_request
from hebe.http.models import (
    TYPE_ALIASES,
    AgentResult,
    BasicAuth,
    Cookie,
    Method,
    PendingRequest,
)

logger = logging.getLogger(__name__)

Callback = Callable[[httpx.Response | None, Any, list[Exception]], None]


class Agent:
    """Builds one request at a time and sends it through an HTTPClient.

    An agent is not safe to share between threads. The HTTPClient it
    sends through is, so concurrent callers should each use their own
    agent over a common client.
    """

    def __init__(self, client: HTTPClient | None = None):
        self.client = client or HTTPClient()
        self.pending = PendingRequest()
        self.debug = False
        self.curl_command = False
        self.logger = logger

    def __enter__(self) -> "Agent":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.client.close()

    # Debug side channel

    def set_debug(self, enable: bool) -> "Agent":
        """Log request and response dumps around every dispatch."""
        self.debug = enable
        return self

    def set_curl_command(self, enable: bool) -> "Agent":
        """Log an equivalent curl command line for every dispatch."""
        self.curl_command = enable
        return self

    def set_logger(self, logger: logging.Logger) -> "Agent":
        self.logger = logger
        return self

    # Verbs. Each one starts a fresh pending request.

    def custom_method(self, method: str, url: str) -> "Agent":
        self.pending = PendingRequest(method=method.upper(), url=url)
        return self

    def get(self, url: str) -> "Agent":
        return self.custom_method(Method.GET.value, url)

    def post(self, url: str) -> "Agent":
        return self.custom_method(Method.POST.value, url)

    def put(self, url: str) -> "Agent":
        return self.custom_method(Method.PUT.value, url)

    def patch(self, url: str) -> "Agent":
        return self.custom_method(Method.PATCH.value, url)

    def delete(self, url: str) -> "Agent":
        return self.custom_method(Method.DELETE.value, url)

    def head(self, url: str) -> "Agent":
        return self.custom_method(Method.HEAD.value, url)

    def options(self, url: str) -> "Agent":
        return self.custom_method(Method.OPTIONS.value, url)

    # Request description

    def header(self, name: str, value: str) -> "Agent":
        """Set a header, replacing any earlier value for the same name."""
        self.pending.headers[name] = value
        return self

    def basic_auth(self, username: str, password: str) -> "Agent":
        self.pending.basic_auth = BasicAuth(username, password)
        return self

    def add_cookie(self, cookie: Cookie) -> "Agent":
        self.pending.cookies.append(cookie)
        return self

    def add_cookies(self, cookies: Iterable[Cookie]) -> "Agent":
        self.pending.cookies.extend(cookies)
        return self

    def query(self, content: Any) -> "Agent":
        """Add query parameters from a mapping, a dataclass, a JSON object
        string or a query string. Calls accumulate.

        A mapping or dataclass has its keys lower-cased and every value must
        be a string. ``;`` is not accepted as a separator; use ``param``
        for values that contain one.
        """
        negotiation.query(self.pending, content)
        return self

    def param(self, key: str, value: str) -> "Agent":
        """Add one query parameter as-is."""
        self.pending.query.append((key, value))
        return self

    def set_type(self, name: str) -> "Agent":
        """Force the body type: html, json, xml, text, urlencoded, form or form-data."""
        content_type = TYPE_ALIASES.get(name)
        if content_type is None:
            self.pending.errors.append(ContentTypeError(f'incorrect type "{name}"'))
        else:
            self.pending.forced_type = content_type
        return self

    def send(self, content: Any) -> "Agent":
        """Add body content: a JSON or form string, a list, a mapping or a
        dataclass. Successive calls merge into one body.

        A string that is neither JSON nor a form switches the body to raw
        text for the rest of the request.
        """
        negotiation.send(self.pending, content)
        return self

    def send_object(self, content: Any) -> "Agent":
        negotiation.send_object(self.pending, content)
        return self

    def send_list(self, items: list[Any] | tuple[Any, ...]) -> "Agent":
        negotiation.send_list(self.pending, items)
        return self

    def send_string(self, content: str) -> "Agent":
        negotiation.send_string(self.pending, content)
        return self

    # Transport settings. These live on the shared client and outlive the
    # pending request.

    def timeout(self, timeout: float | timedelta | None) -> "Agent":
        try:
            self.client.set_timeout(timeout)
        except AgentError as e:
            self.pending.errors.append(e)
        return self

    def proxy(self, proxy_url: str) -> "Agent":
        """Send through a proxy. ``""`` disables proxies entirely."""
        try:
            self.client.set_proxy(proxy_url)
        except AgentError as e:
            self.pending.errors.append(e)
        return self

    def tls_config(self, config: ssl.SSLContext | bool | str | Path) -> "Agent":
        try:
            self.client.set_verify(config)
        except AgentError as e:
            self.pending.errors.append(e)
        return self

    def redirect_policy(self, policy: RedirectPolicy | None) -> "Agent":
        """Install a redirect policy. It is called with the next request and
        the requests so far, and stops the redirect by raising RedirectError.
        """
        self.client.set_redirect_policy(policy)
        return self

    # Dispatch

    def end(self, callback: Callback | None = None) -> AgentResult:
        """Send the request and return ``(response, body text, errors)``."""
        response, _, errors = self.end_bytes()
        body = response.text if response is not None else None
        if callback is not None:
            callback(response, body, errors)
        return AgentResult(response, body, errors)

    def end_bytes(self, callback: Callback | None = None) -> AgentResult:
        """Send the request and return ``(response, body bytes, errors)``.

        Errors recorded while building are returned without sending
        anything. Transport failures come back the same way, with no
        response and no body.
        """
        pending = self.pending
        if pending.errors:
            return AgentResult(None, None, pending.errors)

        try:
            request = make_request(pending)
        except (AgentError, httpx.InvalidURL) as e:
            pending.errors.append(e)
            return AgentResult(None, None, pending.errors)

        self.client.prepare(request)
        if self.debug:
            self.logger.debug("HTTP Request: %s", render_request(request))
        if self.curl_command:
            self.logger.debug("CURL command line: %s", format_curl(request))

        try:
            response = self.client.send(request)
        except (httpx.HTTPError, RedirectError) as e:
            self.logger.debug("Request to %s failed: %s", request.url, e)
            pending.errors.append(e)
            return AgentResult(None, None, pending.errors)

        if self.debug:
            self.logger.debug("HTTP Response: %s", render_response(response))

        content = response.content
        if callback is not None:
            callback(response, content, [])
        return AgentResult(response, content, [])

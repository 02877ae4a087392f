"""
Shared HTTP transport for request agents.

One HTTPClient wraps one ``httpx.Client`` together with the settings that
outlive a single request: timeout, proxy, TLS, redirect policy and the
cookie jar. Any number of agents may share an HTTPClient across threads.

Copyright (c) 2025 Hebe contributors.
"""

import logging
import ssl
import threading
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable

import httpx

from hebe import __version__
from hebe.http.errors import ProxyError, TimeoutConfigError, TLSConfigError

logger = logging.getLogger(__name__)

# Called with the next request and the requests made so far. Raise to stop.
RedirectPolicy = Callable[[httpx.Request, list[httpx.Request]], None]

PROXY_SCHEMES = ("http", "https", "socks5", "socks5h")
DEFAULT_MAX_REDIRECTS = 10


def _default_headers() -> dict[str, str]:
    return {"User-Agent": f"hebe/{__version__}"}


@dataclass
class ClientSettings:
    """Transport configuration shared by every request on a client."""
    timeout: float | None = 30.0
    proxy: str | None = None
    trust_env: bool = True
    verify: ssl.SSLContext | bool = True
    follow_redirects: bool = True
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    redirect_policy: RedirectPolicy | None = None

    # A caller supplied transport is used as-is. Proxy and TLS settings
    # are not applied to it.
    transport: httpx.BaseTransport | None = None

    headers: dict[str, str] = field(default_factory=_default_headers)


class HTTPClient:
    """Lazily built, thread-safe ``httpx.Client`` plus its settings.

    Usage:
        with HTTPClient() as client:
            resp, body, errs = Agent(client).get("http://localhost:9200/").end()
    """

    def __init__(self, settings: ClientSettings | None = None):
        self.settings = settings or ClientSettings()
        self._client: httpx.Client | None = None
        self._stale = False
        self._lock = threading.Lock()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """Close the underlying httpx client."""
        with self._lock:
            if self._client and not self._client.is_closed:
                self._client.close()

    def _build_client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "timeout": httpx.Timeout(self.settings.timeout),
            "follow_redirects": False,  # handled in send() so policies see the chain
            "trust_env": self.settings.trust_env,
        }
        if self.settings.transport is not None:
            kwargs["transport"] = self.settings.transport
        else:
            kwargs["verify"] = self.settings.verify
            if self.settings.proxy:
                kwargs["proxy"] = self.settings.proxy
        return kwargs

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client, rebuilding it after reconfiguration."""
        with self._lock:
            if self._client is None or self._client.is_closed or self._stale:
                old = self._client
                kwargs = self._build_client_kwargs()
                if old is not None:
                    kwargs["cookies"] = old.cookies
                self._client = httpx.Client(**kwargs)
                self._stale = False
                if old is not None and not old.is_closed:
                    old.close()
                logger.debug("Built httpx client (proxy=%s)", self.settings.proxy)
            return self._client

    @property
    def cookies(self) -> httpx.Cookies:
        """The in-memory cookie jar."""
        return self._get_client().cookies

    # Configuration

    def set_timeout(self, timeout: float | timedelta | None) -> None:
        """Set the request timeout in seconds (None disables it).

        Raises:
            TimeoutConfigError: timeout is not a non-negative number
        """
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                raise TimeoutConfigError(f"invalid timeout {timeout!r}")
            if timeout < 0:
                raise TimeoutConfigError(f"timeout must not be negative, got {timeout}")
            timeout = float(timeout)
        with self._lock:
            self.settings.timeout = timeout

    def set_proxy(self, proxy_url: str) -> None:
        """Route requests through a proxy. An empty string disables proxies,
        including any configured through the environment.

        Raises:
            ProxyError: proxy_url cannot be parsed
        """
        if proxy_url == "":
            with self._lock:
                self.settings.proxy = None
                self.settings.trust_env = False
                self._stale = True
            return

        try:
            parsed = httpx.URL(proxy_url)
        except (httpx.InvalidURL, TypeError) as e:
            raise ProxyError(f"invalid proxy URL {proxy_url!r}: {e}") from e
        if parsed.scheme not in PROXY_SCHEMES or not parsed.host:
            raise ProxyError(f"invalid proxy URL {proxy_url!r}")

        with self._lock:
            self.settings.proxy = proxy_url
            self._stale = True

    def set_verify(self, config: ssl.SSLContext | bool | str | Path) -> None:
        """Set TLS verification: an SSLContext, a bool, or a CA bundle path.

        Raises:
            TLSConfigError: config is not usable
        """
        if isinstance(config, (str, Path)):
            try:
                config = ssl.create_default_context(cafile=str(config))
            except (OSError, ssl.SSLError) as e:
                raise TLSConfigError(f"cannot load CA bundle {config}: {e}") from e
        elif not isinstance(config, (ssl.SSLContext, bool)):
            raise TLSConfigError(f"unsupported TLS config {type(config).__name__}")

        with self._lock:
            self.settings.verify = config
            self._stale = True

    def set_redirect_policy(self, policy: RedirectPolicy | None) -> None:
        with self._lock:
            self.settings.redirect_policy = policy

    # Dispatch

    def prepare(self, request: httpx.Request) -> None:
        """Apply client defaults to a request: headers, jar cookies, timeout."""
        for name, value in self.settings.headers.items():
            request.headers.setdefault(name, value)
        self.cookies.set_cookie_header(request)
        request.extensions["timeout"] = httpx.Timeout(self.settings.timeout).as_dict()

    def _check_redirect(self, request: httpx.Request, via: list[httpx.Request]) -> None:
        if self.settings.redirect_policy is not None:
            self.settings.redirect_policy(request, via)
        elif len(via) >= self.settings.max_redirects:
            raise httpx.TooManyRedirects(
                f"stopped after {self.settings.max_redirects} redirects", request=request
            )

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send a prepared request, following redirects.

        The returned response has been read in full.

        Raises:
            httpx.HTTPError: transport failure or too many redirects
            RedirectError: the redirect policy refused a redirect
        """
        client = self._get_client()
        via: list[httpx.Request] = []

        while True:
            response = client.send(request, follow_redirects=False)
            next_request = response.next_request
            if next_request is None or not self.settings.follow_redirects:
                return response

            via.append(request)
            response.close()
            self._check_redirect(next_request, via)
            logger.debug("Redirect %s -> %s", request.url, next_request.url)
            request = next_request

"""
Human readable renderings of requests and responses for debug logging.
"""

import shlex

import httpx


def _body_text(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


def render_request(request: httpx.Request) -> str:
    """Render a request roughly as it goes on the wire."""
    target = request.url.raw_path.decode("ascii")
    lines = [f"{request.method} {target} HTTP/1.1"]
    lines.extend(f"{name}: {value}" for name, value in request.headers.items())
    return "\r\n".join(lines) + "\r\n\r\n" + _body_text(request.content)


def render_response(response: httpx.Response) -> str:
    """Render a response that has already been read."""
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    return "\r\n".join(lines) + "\r\n\r\n" + _body_text(response.content)


def format_curl(request: httpx.Request) -> str:
    """Equivalent curl command line for a request."""
    parts = ["curl", "-X", request.method]
    for name, value in request.headers.items():
        if name.lower() in ("host", "content-length"):
            continue
        parts.extend(["-H", f"{name}: {value}"])
    if request.content:
        parts.extend(["-d", _body_text(request.content)])
    parts.append(str(request.url))
    return " ".join(shlex.quote(part) for part in parts)

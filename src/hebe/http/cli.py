"""
HTTP request CLI commands.

Copyright (c) 2025 Hebe contributors.
"""

import click
from rich.console import Console

from hebe.config import get_config
from hebe.http.agent import Agent
from hebe.http.client import ClientSettings, HTTPClient


def parse_headers(header_strings: list[str]) -> dict[str, str]:
    """Parse header strings in 'Name: Value' format."""
    headers = {}
    for h in header_strings:
        if ":" in h:
            name, value = h.split(":", 1)
            headers[name.strip()] = value.strip()
    return headers


def print_errors(errors: list[Exception]) -> None:
    """Print accumulated agent errors to stderr."""
    console = Console(stderr=True)
    for error in errors:
        console.print(f"[red]Error:[/red] {error}", highlight=False)


def make_agent(timeout: float | None = None, proxy: str | None = None,
               insecure: bool = False, debug: bool | None = None) -> Agent:
    """Build an agent from configuration, with CLI overrides.

    Invalid transport settings are fatal: they are printed and the
    command exits 1 before any request is built.
    """
    config = get_config()
    agent = Agent(HTTPClient(ClientSettings()))

    agent.timeout(config.timeout if timeout is None else timeout)
    proxy = config.proxy if proxy is None else proxy
    if proxy:
        agent.proxy(proxy)
    if insecure or config.insecure:
        agent.tls_config(False)
    agent.set_debug(config.debug if debug is None else debug)

    if agent.pending.errors:
        print_errors(agent.pending.errors)
        agent.client.close()
        raise SystemExit(1)
    return agent


@click.group()
def http():
    """HTTP request tool."""
    pass


@http.command("request")
@click.argument("url")
@click.option("-X", "--method", default="GET", help="HTTP method (GET, POST, PUT, DELETE, etc.)")
@click.option("-H", "--header", multiple=True, help="Headers in 'Name: Value' format")
@click.option("-d", "--data", multiple=True, help="Body content: JSON, form or raw text (repeatable, merged)")
@click.option("-T", "--type", "body_type", help="Force body type (json, form, text, xml, html)")
@click.option("-q", "--query", multiple=True, help="Query as JSON object or query string (repeatable)")
@click.option("-p", "--param", multiple=True, help="Single query param in 'name=value' format")
@click.option("-u", "--user", help="Basic auth in 'username:password' format")
@click.option("-t", "--timeout", type=float, help="Request timeout in seconds")
@click.option("--proxy", help="Proxy URL")
@click.option("-k", "--insecure", is_flag=True, help="Disable TLS verification")
@click.option("--curl", is_flag=True, help="Log an equivalent curl command")
@click.option("-v", "--verbose", is_flag=True, help="Show status and response headers")
@click.pass_context
def request_cmd(ctx, url: str, method: str, header: tuple, data: tuple, body_type: str | None,
                query: tuple, param: tuple, user: str | None, timeout: float | None,
                proxy: str | None, insecure: bool, curl: bool, verbose: bool):
    """Make an HTTP request to a URL.

    Repeated --data values are merged the way chained sends are: JSON
    objects field by field, JSON arrays element by element, form strings
    key by key.

    Examples:
        hebe http request http://localhost:9200/_cluster/health
        hebe http request http://localhost:9200/books/_doc -X POST -d '{"title": "Dune"}'
        hebe http request http://localhost:8080/search -X POST -d "query=bicycle" -d "size=50x50"
        hebe http request http://localhost:9200/_cat/indices -p "h=index;health"
    """
    console = Console()

    agent = make_agent(timeout=timeout, proxy=proxy, insecure=insecure,
                       debug=ctx.obj.get("debug") if ctx.obj else None)
    agent.set_curl_command(curl)
    agent.custom_method(method, url)

    for name, value in parse_headers(list(header)).items():
        agent.header(name, value)
    if body_type:
        agent.set_type(body_type)
    for q in query:
        agent.query(q)
    for p in param:
        if "=" in p:
            name, value = p.split("=", 1)
            agent.param(name, value)
    if user and ":" in user:
        username, password = user.split(":", 1)
        agent.basic_auth(username, password)
    for d in data:
        agent.send(d)

    try:
        resp, body, errs = agent.end()
    finally:
        agent.client.close()

    if errs:
        print_errors(errs)
        raise SystemExit(1)

    if verbose:
        if resp.is_success:
            status_color = "green"
        elif resp.is_redirect:
            status_color = "yellow"
        else:
            status_color = "red"
        console.print(f"[{status_color}]{resp.status_code} {resp.reason_phrase}[/{status_color}] "
                      f"({resp.elapsed.total_seconds() * 1000:.0f}ms)")
        for h_name, h_value in resp.headers.items():
            console.print(f"  [dim]{h_name}:[/dim] {h_value}", highlight=False)
        console.print()

    if body:
        console.print(body, markup=False, highlight=False, soft_wrap=True)


@http.command("get")
@click.argument("url")
@click.option("-H", "--header", multiple=True, help="Headers in 'Name: Value' format")
@click.option("-p", "--param", multiple=True, help="Query params in 'name=value' format")
@click.option("-v", "--verbose", is_flag=True, help="Show details")
@click.pass_context
def get_cmd(ctx, url: str, header: tuple, param: tuple, verbose: bool):
    """Make a GET request (shortcut).

    Examples:
        hebe http get http://localhost:9200/
        hebe http get http://localhost:9200/_cat/health -p v= -v
    """
    ctx.invoke(request_cmd, url=url, method="GET", header=header, param=param,
               verbose=verbose, data=(), body_type=None, query=(), user=None,
               timeout=None, proxy=None, insecure=False, curl=False)

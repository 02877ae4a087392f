"""Pytest configuration and fixtures for hebe tests.

Requests go through ``httpx.MockTransport`` installed on the shared
client, so nothing touches the network.
"""

from __future__ import annotations

import logging
from typing import Callable, Generator

import httpx
import pytest

from hebe.config import HebeConfig, set_config
from hebe.http import Agent, ClientSettings, HTTPClient

Handler = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """MockTransport handler that keeps every request it receives."""

    def __init__(self, handler: Handler | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        return httpx.Response(200, text="ok")

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_client(recorder: Recorder) -> HTTPClient:
    return HTTPClient(ClientSettings(transport=httpx.MockTransport(recorder)))


@pytest.fixture(autouse=True)
def default_config() -> Generator[HebeConfig, None, None]:
    """Keep tests independent of HEBE_* variables and .env files."""
    config = HebeConfig()
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def client(recorder: Recorder) -> Generator[HTTPClient, None, None]:
    with make_client(recorder) as c:
        yield c


@pytest.fixture
def agent(client: HTTPClient) -> Agent:
    return Agent(client)


@pytest.fixture(autouse=True)
def restore_package_logger() -> Generator[None, None, None]:
    """CLI invocations reconfigure the ``hebe`` logger; put it back afterwards."""
    logger = logging.getLogger("hebe")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for handler in logger.handlers:
        if handler not in saved[0]:
            handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]

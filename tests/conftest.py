"""Pytest configuration and fixtures for PenguinWhisk client tests."""

from __future__ import annotations

from typing import Generator

import httpx
import pytest
from flask import Flask

from whisk_client import ClientConfig, WhiskClient
from whisk_client.testing import create_controller

API_KEY = '23bc46b1-71f6-4ed5-8c54-816aa4f8c502:secret'
NAMESPACE = 'guest'


@pytest.fixture
def blocking_wait() -> float:
    """Server-side wait window for blocking invocations, in seconds."""
    return 10.0


@pytest.fixture
def controller(blocking_wait: float) -> Generator[Flask, None, None]:
    """Create the in-memory controller.

    Args:
        blocking_wait: Wait window fixture.

    Yields:
        Flask application; pending activations are joined on teardown.
    """
    app = create_controller(api_key=API_KEY, namespace=NAMESPACE, blocking_wait=blocking_wait)
    yield app
    app.extensions['whisk'].join(timeout=5)


@pytest.fixture
def config() -> ClientConfig:
    """Client configuration pointing at the in-memory controller."""
    return ClientConfig(
        api_key=API_KEY,
        api_host='http://whisk.test',
        namespace=NAMESPACE,
        default_kind='python:3',
        poll_interval=0.05,
    )


@pytest.fixture
def client(controller: Flask, config: ClientConfig) -> Generator[WhiskClient, None, None]:
    """Create a client wired to the controller through a WSGI transport.

    Args:
        controller: Controller fixture.
        config: Client configuration fixture.

    Yields:
        Client instance, closed on teardown.
    """
    with WhiskClient(config, transport=httpx.WSGITransport(app=controller)) as whisk:
        yield whisk

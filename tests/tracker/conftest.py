"""Pytest fixtures for tracker module testing."""

from collections.abc import Iterator
from typing import Any

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from tracker.sink import HttpUploadSink


class Collector:
    """In-process stand-in for the external fix collector."""

    def __init__(self) -> None:
        self.received: list[dict[str, Any]] = []
        self.headers: list[dict[str, str]] = []
        self.app = FastAPI()

        @self.app.post("/fixes")
        async def receive_fix(request: Request) -> dict[str, str]:
            self.received.append(await request.json())
            self.headers.append(dict(request.headers))
            return {"status": "ok"}


@pytest.fixture
def collector() -> Collector:
    return Collector()


@pytest.fixture
def collector_client(collector: Collector) -> Iterator[TestClient]:
    with TestClient(collector.app) as client:
        yield client


@pytest.fixture
def http_sink(collector_client: TestClient) -> HttpUploadSink:
    return HttpUploadSink("http://testserver/fixes", client=collector_client)

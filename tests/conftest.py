"""Test configuration and fixtures.

Core tests drive the coordinator directly through an in-memory transport;
endpoint tests go through FastAPI's TestClient with a fresh coordinator per
test so room state never leaks between tests.
"""

import json
import os
from typing import Generator, Iterable, List

# Set env flags BEFORE importing application modules
os.environ.setdefault("DEBUG", "1")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("PUBLIC_DIR", "./tests/__no_public__")

import pytest
from fastapi.testclient import TestClient

from main import app
from services.coordinator import SignalingCoordinator


class FakeTransport:
    """Records frames instead of writing to a socket."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: List[str] = []
        self.open = True
        self.fail = fail

    @property
    def is_open(self) -> bool:
        return self.open

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("socket is gone")
        self.sent.append(data)

    def messages(self) -> list:
        return [json.loads(s) for s in self.sent]


class SequenceAllocator:
    """Hands out the given identities in order, so scenarios can say "A" and "B"."""

    def __init__(self, ids: Iterable[str]) -> None:
        self._ids = iter(ids)

    def allocate(self) -> str:
        return next(self._ids)


@pytest.fixture()
def coordinator() -> SignalingCoordinator:
    return SignalingCoordinator(allocator=SequenceAllocator("ABCDEFGH"))


@pytest.fixture()
def make_transport():
    return FakeTransport


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    original = app.state.signaling
    app.state.signaling = SignalingCoordinator()
    # Context-managed so every websocket session shares one event loop
    with TestClient(app) as c:
        yield c
    app.state.signaling = original

import anyio
import pytest

from chatrelay.core import state
from chatrelay.services.chat_handler import ChatEventHandler
from chatrelay.services.connection_manager import ConnectionManager
from chatrelay.services.user_registry import UserRegistry


class FakeWebSocket:
    """Stands in for a FastAPI WebSocket and records what was sent to it."""

    def __init__(self, fail: bool = False):
        self.accepted = False
        self.sent = []
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        # A real socket yields to the loop on every send
        await anyio.sleep(0)
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)

    def of_type(self, kind):
        return [m for m in self.sent if m["type"] == kind]

    def texts(self):
        return [m["text"] for m in self.of_type("message")]


@pytest.fixture
def registry():
    """Fixture for an empty user registry."""
    return UserRegistry()


@pytest.fixture
def connections():
    """Fixture for a connection manager with no connections."""
    return ConnectionManager()


@pytest.fixture
def handler(registry, connections):
    """Fixture for a chat event handler wired to fresh state."""
    return ChatEventHandler(registry=registry, connections=connections, bot_name="XeroxChat Bot")


@pytest.fixture
def fresh_state(monkeypatch, registry, connections, handler):
    """Swap the app-wide singletons for fresh ones for one test."""
    monkeypatch.setattr(state, "user_registry", registry)
    monkeypatch.setattr(state, "connection_manager", connections)
    monkeypatch.setattr(state, "chat_handler", handler)
    return handler

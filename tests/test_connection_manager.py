"""
Tests for WebSocket group membership and delivery.
"""

import pytest

from tests.conftest import FakeWebSocket


@pytest.mark.asyncio
async def test_connect_accepts_and_assigns_unique_ids(connections):
    first, second = FakeWebSocket(), FakeWebSocket()

    a = await connections.connect(first)
    b = await connections.connect(second)

    assert first.accepted and second.accepted
    assert a != b
    assert set(connections.connections) == {a, b}


@pytest.mark.asyncio
async def test_broadcast_respects_groups_and_exclusion(connections):
    sockets = [FakeWebSocket() for _ in range(3)]
    a, b, c = [await connections.connect(ws) for ws in sockets]
    connections.join_group(a, "lobby")
    connections.join_group(b, "lobby")
    connections.join_group(c, "games")

    await connections.broadcast_to_room("lobby", {"type": "ping"}, exclude=a)

    assert sockets[0].sent == []
    assert sockets[1].sent == [{"type": "ping"}]
    assert sockets[2].sent == []


@pytest.mark.asyncio
async def test_broadcast_to_empty_room_is_noop(connections):
    await connections.broadcast_to_room("nobody-here", {"type": "ping"})


@pytest.mark.asyncio
async def test_failed_send_does_not_stop_broadcast(connections):
    dead, alive = FakeWebSocket(fail=True), FakeWebSocket()
    a = await connections.connect(dead)
    b = await connections.connect(alive)
    connections.join_group(a, "lobby")
    connections.join_group(b, "lobby")

    await connections.broadcast_to_room("lobby", {"type": "ping"})

    assert alive.sent == [{"type": "ping"}]


@pytest.mark.asyncio
async def test_disconnect_drops_connection_and_empty_groups(connections):
    ws = FakeWebSocket()
    a = await connections.connect(ws)
    connections.join_group(a, "lobby")

    connections.disconnect(a)
    connections.disconnect(a)

    assert connections.connections == {}
    assert connections.groups == {}
    assert connections.group_members("lobby") == set()


@pytest.mark.asyncio
async def test_join_group_after_disconnect_is_ignored(connections):
    a = await connections.connect(FakeWebSocket())
    connections.disconnect(a)

    connections.join_group(a, "lobby")

    assert connections.groups == {}


@pytest.mark.asyncio
async def test_send_personal_to_unknown_connection_is_noop(connections):
    await connections.send_personal("missing", {"type": "ping"})

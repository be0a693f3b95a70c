import anyio
import pytest

from carmarket.services.connection_manager import ConnectionManager
from conftest import create_car, create_user, login


class FakeSocket:
    def __init__(self):
        self.sent = []

    async def send_json(self, payload):
        self.sent.append(payload)


class BrokenSocket:
    async def send_json(self, payload):
        raise RuntimeError("socket is closed")


@pytest.mark.anyio
async def test_register_and_unregister_broadcast_status():
    manager = ConnectionManager()
    first, second = FakeSocket(), FakeSocket()

    await manager.register(1, first)
    await manager.register(2, second)
    assert manager.is_online(1) and manager.is_online(2)

    update = first.sent[-1]
    assert update["type"] == "user_status_update"
    assert update["data"]["userId"] == 2
    assert update["data"]["isOnline"] is True
    assert update["data"]["lastSeen"]

    await manager.unregister(second)
    assert not manager.is_online(2)
    assert first.sent[-1]["data"]["userId"] == 2
    assert first.sent[-1]["data"]["isOnline"] is False

    snapshot = manager.status_snapshot()
    assert snapshot[1]["is_online"] is True
    assert snapshot[2]["is_online"] is False


@pytest.mark.anyio
async def test_failed_send_drops_the_socket():
    manager = ConnectionManager()
    await manager.register(1, BrokenSocket())

    assert await manager.send(1, {"type": "ping"}) is False
    assert not manager.is_online(1)
    assert manager.status_snapshot()[1]["is_online"] is False
    assert await manager.send(1, {"type": "ping"}) is False


@pytest.mark.anyio
async def test_new_socket_replaces_the_old_one():
    manager = ConnectionManager()
    old, new = FakeSocket(), FakeSocket()
    await manager.register(1, old)
    await manager.register(1, new)

    await manager.send(1, {"type": "ping"})
    assert new.sent[-1] == {"type": "ping"}
    assert {"type": "ping"} not in old.sent

    # closing the stale socket keeps the user online
    await manager.unregister(old)
    assert manager.is_online(1)


@pytest.mark.anyio
async def test_push_from_worker_thread():
    manager = ConnectionManager()
    socket = FakeSocket()
    await manager.register(1, socket)

    assert await anyio.to_thread.run_sync(manager.push, 1, {"type": "ping"}) is True
    assert socket.sent[-1] == {"type": "ping"}
    assert await anyio.to_thread.run_sync(manager.push, 2, {"type": "ping"}) is False


def test_new_message_is_pushed_to_open_socket(client):
    seller = create_user("Ivan Petrov")
    create_user("Anna Smirnova")
    car_id = create_car(seller, name="BMW M5")

    login(client, "Ivan Petrov")
    with client.websocket_connect("/ws") as ws:
        ws.send_text("not json")
        ws.send_json({"type": "authenticate", "userId": seller})

        status = ws.receive_json()
        assert status["type"] == "user_status_update"
        assert status["data"]["userId"] == seller
        assert status["data"]["isOnline"] is True

        assert client.get("/api/users/status").json()[str(seller)]["isOnline"] is True

        login(client, "Anna Smirnova")
        resp = client.post("/api/messages", json={"carId": car_id, "recipientId": seller, "content": "Still for sale?"})
        assert resp.status_code == 201

        assert ws.receive_json() == {
            "type": "new_message",
            "data": {
                "carId": car_id,
                "carName": "BMW M5",
                "senderName": "Anna Smirnova",
                "message": "Still for sale?",
            },
        }


def test_authenticate_needs_matching_session(client):
    seller = create_user("Ivan Petrov")
    other = create_user("Anna Smirnova")

    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "authenticate", "userId": seller})
        assert ws.receive_json() == {"type": "error", "message": "Authentication failed"}

    login(client, "Ivan Petrov")
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "authenticate", "userId": other})
        assert ws.receive_json() == {"type": "error", "message": "Authentication failed"}

    assert client.get("/api/users/status").json() == {}

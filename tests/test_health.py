from fastapi.testclient import TestClient

from carmarket.main import create_app


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_unhandled_errors_become_500(guard):
    app = create_app(login_guard=guard)

    @app.get("/api/boom")
    def boom():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.get("/api/boom")

    assert resp.status_code == 500
    assert resp.json() == {"message": "Internal server error"}


def test_unknown_route_uses_message_body(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not Found"}

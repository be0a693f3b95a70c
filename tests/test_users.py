from carmarket.data.models.user import UserModel
from conftest import car_payload, create_car, create_user, login


def test_admin_lists_users_without_passwords(client):
    create_user("Anna Admin", role="admin")
    create_user("Ivan Petrov")
    login(client, "Anna Admin")

    users = client.get("/api/users").json()
    assert {u["username"] for u in users} == {"Anna Admin", "Ivan Petrov"}
    for u in users:
        assert "password" not in u


def test_non_admins_are_refused(client):
    create_user("Ivan Petrov")
    create_user("Olga Moderova", role="moderator")

    assert client.get("/api/users").status_code == 401

    login(client, "Ivan Petrov")
    resp = client.get("/api/users")
    assert resp.status_code == 403
    assert resp.json() == {"message": "Insufficient permissions"}

    login(client, "Olga Moderova")
    assert client.get("/api/users").status_code == 403
    assert client.delete("/api/users/1").status_code == 403


def test_update_user_and_role(client):
    create_user("Anna Admin", role="admin")
    user_id = create_user("Ivan Petrov")
    create_user("Anna Smirnova")
    login(client, "Anna Admin")

    resp = client.patch(f"/api/users/{user_id}", json={"username": " Ivan Sidorov ", "role": "moderator"})
    assert resp.status_code == 200
    assert resp.json()["username"] == "Ivan Sidorov"
    assert resp.json()["role"] == "moderator"

    resp = client.patch(f"/api/users/{user_id}", json={"username": "Anna Smirnova", "role": "user"})
    assert resp.status_code == 400

    resp = client.patch(f"/api/users/{user_id}/role", json={"role": "admin"})
    assert resp.json()["role"] == "admin"

    assert client.patch(f"/api/users/{user_id}/role", json={"role": "owner"}).status_code == 400
    assert client.patch("/api/users/999/role", json={"role": "user"}).status_code == 404


def test_delete_user_removes_everything(client, make_client):
    admin_id = create_user("Anna Admin", role="admin")
    seller = create_user("Ivan Petrov")
    other_seller = create_user("Oleg Kuznetsov")
    car_id = create_car(seller)
    other_car = create_car(other_seller, name="Lada Vesta")

    seller_client = make_client()
    login(seller_client, "Ivan Petrov")
    seller_client.post("/api/car-applications", json=car_payload())
    seller_client.post("/api/favorites", json={"carId": other_car})
    seller_client.post("/api/messages", json={"carId": other_car, "recipientId": other_seller, "content": "Hello"})

    login(client, "Anna Admin")
    assert client.delete(f"/api/users/{admin_id}").status_code == 400

    resp = client.delete(f"/api/users/{seller}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "User and all related data were removed"}

    assert client.get(f"/api/cars/{car_id}").status_code == 404
    assert client.get("/api/applications").json() == []
    assert client.get("/api/messages/all").json() == []
    assert seller_client.get("/api/user").status_code == 401
    assert client.delete(f"/api/users/{seller}").status_code == 404

    stats = client.get("/api/admin/stats").json()
    assert stats["totalUsers"] == 2
    assert stats["totalCars"] == 1


def test_stats(client, make_client):
    create_user("Olga Moderova", role="moderator")
    seller = create_user("Ivan Petrov")
    create_user("Anna Smirnova")
    car_id = create_car(seller)

    buyer = make_client()
    login(buyer, "Anna Smirnova")
    buyer.post("/api/messages", json={"carId": car_id, "recipientId": seller, "content": "Hello"})
    buyer.post("/api/car-applications", json=car_payload())

    login(client, "Olga Moderova")
    assert client.get("/api/admin/stats").json() == {
        "totalUsers": 3,
        "totalCars": 1,
        "pendingApplications": 1,
        "totalMessages": 1,
        "unreadMessages": 1,
    }

    assert buyer.get("/api/admin/stats").status_code == 403


def test_status_map_requires_login(client):
    create_user("Ivan Petrov")
    assert client.get("/api/users/status").status_code == 401

    login(client, "Ivan Petrov")
    assert client.get("/api/users/status").json() == {}


def test_update_user_rejects_blank_username(client, db):
    create_user("Anna Admin", role="admin")
    user_id = create_user("Ivan Petrov")
    login(client, "Anna Admin")

    resp = client.patch(f"/api/users/{user_id}", json={"username": "   ", "role": "user"})
    assert resp.status_code == 400
    assert resp.json()["field"] == "username"

    resp = client.patch(f"/api/users/{user_id}", json={"username": "x" * 51, "role": "user"})
    assert resp.status_code == 400

    assert db.get(UserModel, user_id).username == "Ivan Petrov"

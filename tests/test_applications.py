import threading

from carmarket.data.database import SessionLocal
from carmarket.data.models.car import CarModel
from carmarket.data.models.car_application import CarApplicationModel
from carmarket.data.models.user import UserModel
from carmarket.domain.schemas import CarApplicationCreate
from carmarket.repos.application_repo import ApplicationRepo
from carmarket.services.application_service import ApplicationService
from conftest import car_payload, create_user, login


def test_approval_publishes_car_for_submitter(client, make_client):
    seller = create_user("Ivan Petrov")
    create_user("Olga Moderova", role="moderator")

    login(client, "Ivan Petrov")
    resp = client.post("/api/car-applications", json=car_payload())
    assert resp.status_code == 201
    application = resp.json()
    assert application["status"] == "pending"
    assert application["createdBy"] == seller
    assert application["reviewedBy"] is None

    # nothing is public until review
    assert client.get("/api/cars").json() == []
    assert [a["id"] for a in client.get("/api/my-applications").json()] == [application["id"]]

    moderator = make_client()
    moderator_id = login(moderator, "Olga Moderova")["id"]
    pending = moderator.get("/api/applications/pending").json()
    assert [a["id"] for a in pending] == [application["id"]]

    resp = moderator.patch(f"/api/applications/{application['id']}", json={"status": "approved"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "approved"
    assert resp.json()["reviewedBy"] == moderator_id
    assert resp.json()["reviewedAt"] is not None

    cars = client.get("/api/cars").json()
    assert len(cars) == 1
    assert cars[0]["name"] == "BMW M5"
    assert cars[0]["price"] == 8500000
    assert cars[0]["description"] == "F90 sport sedan"
    assert cars[0]["createdBy"] == seller
    assert [c["id"] for c in client.get("/api/my-cars").json()] == [cars[0]["id"]]

    assert moderator.get("/api/applications/pending").json() == []
    assert len(moderator.get("/api/applications").json()) == 1


def test_rejection_publishes_nothing(client, make_client):
    create_user("Ivan Petrov")
    create_user("Olga Moderova", role="moderator")

    login(client, "Ivan Petrov")
    application_id = client.post("/api/car-applications", json=car_payload()).json()["id"]

    moderator = make_client()
    login(moderator, "Olga Moderova")
    resp = moderator.patch(f"/api/applications/{application_id}", json={"status": "rejected"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"

    assert client.get("/api/cars").json() == []
    assert client.get("/api/my-applications").json()[0]["status"] == "rejected"


def test_review_is_final(client):
    create_user("Ivan Petrov")
    create_user("Anna Admin", role="admin")

    login(client, "Ivan Petrov")
    application_id = client.post("/api/car-applications", json=car_payload()).json()["id"]

    login(client, "Anna Admin")
    assert client.patch(f"/api/applications/{application_id}", json={"status": "approved"}).status_code == 200

    resp = client.patch(f"/api/applications/{application_id}", json={"status": "rejected"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Application was already approved"
    assert len(client.get("/api/cars").json()) == 1


def test_review_errors(client):
    create_user("Ivan Petrov")
    create_user("Olga Moderova", role="moderator")

    login(client, "Ivan Petrov")
    application_id = client.post("/api/car-applications", json=car_payload()).json()["id"]

    assert client.get("/api/applications").status_code == 403
    assert client.get("/api/applications/pending").status_code == 403
    assert client.patch(f"/api/applications/{application_id}", json={"status": "approved"}).status_code == 403

    login(client, "Olga Moderova")
    assert client.patch("/api/applications/999", json={"status": "approved"}).status_code == 404
    assert client.patch(f"/api/applications/{application_id}", json={"status": "maybe"}).status_code == 400


def test_submit_requires_login_and_valid_listing(client):
    assert client.post("/api/car-applications", json=car_payload()).status_code == 401

    create_user("Ivan Petrov")
    login(client, "Ivan Petrov")
    resp = client.post("/api/car-applications", json=car_payload(server="moon"))
    assert resp.status_code == 400
    assert resp.json()["field"] == "server"

    resp = client.post("/api/car-applications", json=car_payload(price=-1))
    assert resp.status_code == 400


def test_concurrent_approvals_publish_one_car(monkeypatch):
    seller = create_user("Ivan Petrov")
    moderators = [create_user("Olga Moderova", role="moderator"), create_user("Anna Admin", role="admin")]

    with SessionLocal() as session:
        author = session.get(UserModel, seller)
        application_id = ApplicationService(session).submit(CarApplicationCreate(**car_payload()), author).id

    # both reviewers read the application while it is still pending
    barrier = threading.Barrier(2, timeout=5)
    get_application = ApplicationRepo.get_application

    def get_then_wait(self, app_id):
        application = get_application(self, app_id)
        barrier.wait()
        return application

    monkeypatch.setattr(ApplicationRepo, "get_application", get_then_wait)

    results = []

    def review(moderator_id):
        with SessionLocal() as session:
            moderator = session.get(UserModel, moderator_id)
            try:
                ApplicationService(session).review(application_id, "approved", moderator)
                results.append("ok")
            except ValueError as e:
                results.append(str(e))

    threads = [threading.Thread(target=review, args=(moderator_id,)) for moderator_id in moderators]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=15)

    assert sorted(results) == ["Application was already reviewed", "ok"]
    with SessionLocal() as session:
        assert session.query(CarModel).count() == 1
        assert session.get(CarApplicationModel, application_id).status == "approved"

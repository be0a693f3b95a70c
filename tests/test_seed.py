from carmarket.data.models.user import UserModel
from carmarket.data.seed import seed
from carmarket.services.auth_service import verify_password


def test_seed_creates_admin_once(db):
    admin = seed("Main Admin", "Admin#2024")
    assert admin.role == "admin"

    stored = db.query(UserModel).one()
    assert stored.username == "Main Admin"
    assert verify_password("Admin#2024", stored.password)

    assert seed("Other Admin", "Admin#2024") is None
    assert db.query(UserModel).count() == 1


def test_seed_without_credentials(db):
    assert seed(None, None) is None
    assert db.query(UserModel).count() == 0

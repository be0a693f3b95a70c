# carmarket/data/seed.py
import carmarket.data.models  # noqa: F401
from carmarket.data.database import Base, SessionLocal, engine
from carmarket.data.models.user import UserModel
from carmarket.services.auth_service import hash_password
from carmarket.utils.settings import ADMIN_USERNAME, ADMIN_PASSWORD
from carmarket.utils.logging import get_logger

logger = get_logger(__name__)


def seed(username: str | None = ADMIN_USERNAME, password: str | None = ADMIN_PASSWORD, db=None) -> UserModel | None:
    """Creates the first admin; does nothing once any user exists."""
    if not username or not password:
        logger.warning("ADMIN_USERNAME / ADMIN_PASSWORD not set, nothing to seed")
        return None

    own_session = db is None
    db = db or SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(UserModel).first():
            logger.info("Database already has users, skipping seed")
            return None

        admin = UserModel(username=username, password=hash_password(password), role="admin")
        db.add(admin)
        db.commit()
        db.refresh(admin)
        logger.info(f"Admin account {admin.username} created")
        return admin
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    seed()

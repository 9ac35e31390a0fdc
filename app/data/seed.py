# app/data/seed.py
from app.data.database import SessionLocal
from app.data.models import CategoryModel, UserModel
from app.domain.enums import Role
from app.services.auth_service import hash_password
from app.utils.settings import DEFAULT_CATEGORY_ID, ADMIN_EMAIL, ADMIN_USERNAME, ADMIN_PASSWORD
from app.utils.logging import get_logger

logger = get_logger(__name__)


def seed():
    """Kategoria domyslna (cel przepinania produktow) i pierwszy admin."""
    db = SessionLocal()
    try:
        if not db.get(CategoryModel, DEFAULT_CATEGORY_ID):
            # id z sekwencji - na pustej bazie to 1
            default = CategoryModel(name="Default", description="Produkty z dezaktywowanych kategorii")
            db.add(default)
            db.flush()
            if default.id != DEFAULT_CATEGORY_ID:
                logger.warning(f"Seed: kategoria domyslna ma id {default.id}, ustaw DEFAULT_CATEGORY_ID={default.id}")
            else:
                logger.info(f"Seed: kategoria domyslna {default.id}")

        if not db.query(UserModel).filter(UserModel.email == ADMIN_EMAIL).first():
            db.add(UserModel(
                name="Administrator",
                username=ADMIN_USERNAME,
                email=ADMIN_EMAIL,
                password_hash=hash_password(ADMIN_PASSWORD),
                role=Role.ADMIN.value,
            ))
            logger.info(f"Seed: admin {ADMIN_EMAIL}")

        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    seed()

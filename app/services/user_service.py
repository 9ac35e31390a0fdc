from fastapi import UploadFile
from sqlalchemy.orm import Session

from app.data.models.user import UserModel
from app.repos.user_repo import UserRepo
from app.domain.enums import Role
from app.domain.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenFieldError,
    NotFoundError,
    ValidationError,
)
from app.domain.schemas import RegisterIn, LoginIn, UserUpdateIn
from app.services.auth_service import hash_password, verify_password, create_access_token
from app.utils.upload import delete_upload_file, save_upload_file
from app.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def _ensure_unique(self, email: str | None, username: str | None, exclude_id: int | None = None):
        if email:
            existing = self.repo.get_by_email(email.lower())
            if existing and existing.id != exclude_id:
                raise ConflictError(f"Email {email} jest juz zarejestrowany")
        if username:
            existing = self.repo.get_by_username(username)
            if existing and existing.id != exclude_id:
                raise ConflictError(f"Username {username} jest juz zarejestrowany")

    def _create(self, payload: RegisterIn, role: Role, picture: UploadFile | None = None) -> UserModel:
        self._ensure_unique(payload.email, payload.username)
        profile_picture = save_upload_file(picture, "users")
        user = UserModel(
            name=payload.name,
            username=payload.username,
            email=payload.email.lower(),
            password_hash=hash_password(payload.password),
            role=role.value,
            is_active=True,
            profile_picture=profile_picture,
        )
        created = self.repo.create_user(user)
        logger.info(f"Utworzono uzytkownika {created.id} z rola {role.value}")
        return created

    def register(self, payload: RegisterIn, picture: UploadFile | None = None) -> UserModel:
        # rola zawsze CLIENT, nadaje ja dopiero admin
        if payload.role:
            raise ForbiddenFieldError(
                "Nie mozna ustawic roli - rola CLIENT jest nadawana automatycznie"
            )
        return self._create(payload, Role.CLIENT, picture)

    def add_admin(self, payload: RegisterIn, picture: UploadFile | None = None) -> UserModel:
        return self._create(payload, Role.ADMIN, picture)

    def login(self, payload: LoginIn) -> dict:
        user = self.repo.get_by_login(
            payload.email.lower() if payload.email else None,
            payload.username,
        )
        if not user or not verify_password(user.password_hash, payload.password):
            logger.warning("Nieudane logowanie")
            raise AuthenticationError("Niepoprawne dane logowania")
        if not user.is_active:
            raise AuthenticationError("Konto jest nieaktywne")

        return {
            "access_token": create_access_token(user.id),
            "token_type": "bearer",
            "profile_picture": user.profile_picture,
        }

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("Uzytkownik nie istnieje")
        return user

    def list_users(self) -> list[UserModel]:
        return self.repo.list_users()

    def update_user(self, user_id: int, payload: UserUpdateIn) -> UserModel:
        if payload.role:
            raise ForbiddenFieldError("Nie mozna modyfikowac roli tym endpointem")

        user = self.get_user(user_id)
        data = payload.model_dump(exclude_unset=True, exclude={"role"})
        self._ensure_unique(data.get("email"), data.get("username"), exclude_id=user.id)

        if data.get("name"):
            user.name = data["name"]
        if data.get("username"):
            user.username = data["username"]
        if data.get("email"):
            user.email = data["email"].lower()
        if data.get("password"):
            user.password_hash = hash_password(data["password"])

        updated = self.repo.save(user)
        logger.info(f"Zaktualizowano uzytkownika {user_id}")
        return updated

    def update_role(self, user_id: int, role: Role) -> UserModel:
        user = self.get_user(user_id)
        user.role = role.value
        updated = self.repo.save(user)
        logger.info(f"Uzytkownik {user_id} ma teraz role {role.value}")
        return updated

    def deactivate(self, user_id: int) -> UserModel:
        user = self.get_user(user_id)
        user.is_active = False
        updated = self.repo.save(user)
        logger.info(f"Dezaktywowano uzytkownika {user_id}")
        return updated

    def update_photo(self, user_id: int, picture: UploadFile | None) -> UserModel:
        """Podmiana zdjecia profilowego, poprzedni plik usuwany po commicie."""
        if not picture or not picture.filename:
            raise ValidationError("Nie przeslano zdjecia profilowego")

        user = self.get_user(user_id)
        old_picture = user.profile_picture

        user.profile_picture = save_upload_file(picture, "users")
        updated = self.repo.save(user)

        if old_picture:
            delete_upload_file(old_picture)

        logger.info(f"Zaktualizowano zdjecie profilowe uzytkownika {user_id}")
        return updated

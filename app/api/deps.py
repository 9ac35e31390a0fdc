# app/api/deps.py
from fastapi import Depends, Form, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import EmailStr
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.enums import Role
from app.domain.errors import ShopError
from app.domain.policy import is_allowed
from app.domain.schemas import RegisterIn
from app.repos.user_repo import UserRepo
from app.services.auth_service import decode_token
from app.services.lock_service import LockService

_bearer = HTTPBearer(auto_error=False)


def to_http(error: ShopError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> UserModel:
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Brak tokenu")

    user_id = decode_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Niepoprawny token")

    user = UserRepo(db).get_user(user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Uzytkownik nieaktywny")

    return user


def require_roles(*roles: Role):
    """
    Fabryka dependency: user=Depends(require_roles(Role.ADMIN))
    Decyzje podejmuje is_allowed, tu tylko mapowanie na 403.
    """

    def dependency(user: UserModel = Depends(get_current_user)) -> UserModel:
        if not is_allowed(user.role, roles):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Brak uprawnien")
        return user

    return dependency


require_admin = require_roles(Role.ADMIN)
require_any_role = require_roles(Role.ADMIN, Role.CLIENT)


def get_lock_service() -> LockService:
    return LockService()


def register_form(
    name: str = Form(..., min_length=3, max_length=100),
    username: str = Form(..., min_length=3, max_length=50),
    email: EmailStr = Form(...),
    password: str = Form(..., min_length=6),
    role: str | None = Form(None),
) -> RegisterIn:
    """Pola rejestracji jako multipart - obok nich moze przyjsc zdjecie profilowe."""
    return RegisterIn(name=name, username=username, email=email, password=password, role=role)

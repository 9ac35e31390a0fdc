# app/api/routers/auth.py
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from app.api.deps import register_form, to_http
from app.data.database import get_db
from app.domain.errors import ShopError
from app.domain.schemas import RegisterIn, LoginIn, TokenOut, UserRead
from app.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead, status_code=201)
def register(
    payload: RegisterIn = Depends(register_form),
    profile_picture: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    try:
        return UserService(db).register(payload, profile_picture)
    except ShopError as e:
        raise to_http(e)


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    if not payload.email and not payload.username:
        raise HTTPException(status_code=400, detail="Podaj email albo username")
    try:
        return UserService(db).login(payload)
    except ShopError as e:
        raise to_http(e)

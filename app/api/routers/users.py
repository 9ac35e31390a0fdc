from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from app.api.deps import register_form, require_admin, require_any_role, to_http
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.errors import ShopError
from app.domain.schemas import RegisterIn, RoleIn, UserRead, UserUpdateIn
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


# CLIENT
@router.put("/update", response_model=UserRead)
def update_me(
    payload: UserUpdateIn,
    user: UserModel = Depends(require_any_role),
    db: Session = Depends(get_db),
):
    try:
        return UserService(db).update_user(user.id, payload)
    except ShopError as e:
        raise to_http(e)


@router.patch("/updatePhoto", response_model=UserRead)
def update_my_photo(
    profile_picture: UploadFile | None = File(None),
    user: UserModel = Depends(require_any_role),
    db: Session = Depends(get_db),
):
    try:
        return UserService(db).update_photo(user.id, profile_picture)
    except ShopError as e:
        raise to_http(e)


@router.delete("/delete", response_model=UserRead)
def delete_me(user: UserModel = Depends(require_any_role), db: Session = Depends(get_db)):
    try:
        return UserService(db).deactivate(user.id)
    except ShopError as e:
        raise to_http(e)


# ADMIN
@router.post("/addUser", response_model=UserRead, status_code=201)
def add_user(
    payload: RegisterIn = Depends(register_form),
    profile_picture: UploadFile | None = File(None),
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return UserService(db).add_admin(payload, profile_picture)
    except ShopError as e:
        raise to_http(e)


@router.get("/", response_model=List[UserRead])
def list_users(_: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    return UserService(db).list_users()


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, _: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        return UserService(db).get_user(user_id)
    except ShopError as e:
        raise to_http(e)


@router.put("/updateUser/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    payload: UserUpdateIn,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return UserService(db).update_user(user_id, payload)
    except ShopError as e:
        raise to_http(e)


@router.patch("/updateRole/{user_id}", response_model=UserRead)
def update_role(
    user_id: int,
    payload: RoleIn,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return UserService(db).update_role(user_id, payload.role)
    except ShopError as e:
        raise to_http(e)


@router.delete("/deleteUser/{user_id}", response_model=UserRead)
def delete_user(user_id: int, _: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        return UserService(db).deactivate(user_id)
    except ShopError as e:
        raise to_http(e)


@router.patch("/updatePhoto/{user_id}", response_model=UserRead)
def update_photo(
    user_id: int,
    profile_picture: UploadFile | None = File(None),
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return UserService(db).update_photo(user_id, profile_picture)
    except ShopError as e:
        raise to_http(e)

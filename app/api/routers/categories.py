# app/api/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import require_admin, require_any_role, to_http
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.errors import ShopError
from app.domain.schemas import CategoryIn, CategoryOut, CategoryUpdateIn
from app.services.category_service import CategoryService

router = APIRouter(prefix="/category", tags=["category"])


@router.get("/", response_model=List[CategoryOut])
def list_categories(_: UserModel = Depends(require_any_role), db: Session = Depends(get_db)):
    return CategoryService(db).list_categories()


@router.post("/addCategory", response_model=CategoryOut, status_code=201)
def add_category(payload: CategoryIn, _: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        return CategoryService(db).add_category(payload)
    except ShopError as e:
        raise to_http(e)


@router.put("/updateCategory/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdateIn,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return CategoryService(db).update_category(category_id, payload)
    except ShopError as e:
        raise to_http(e)


@router.get("/getCategoryById/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, _: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        return CategoryService(db).get_category(category_id)
    except ShopError as e:
        raise to_http(e)


@router.delete("/deleteCategory/{category_id}", response_model=CategoryOut)
def delete_category(category_id: int, _: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    """
    Dezaktywacja + przepiecie produktow do kategorii domyslnej.
    Brak kategorii domyslnej -> 500, ale dezaktywacja zostaje.
    """
    try:
        return CategoryService(db).deactivate_category(category_id)
    except ShopError as e:
        raise to_http(e)


@router.patch("/activateCategory/{category_id}", response_model=CategoryOut)
def activate_category(category_id: int, _: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        return CategoryService(db).activate_category(category_id)
    except ShopError as e:
        raise to_http(e)

#app/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import require_any_role, to_http
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.errors import ShopError
from app.domain.schemas import ItemIn, CartOut
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db=db)


@router.post("/createCart", response_model=CartOut, status_code=201)
def create_cart(user: UserModel = Depends(require_any_role), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.create_cart(user.id)
    except ShopError as e:
        raise to_http(e)


@router.get("/", response_model=CartOut)
def get_cart(user: UserModel = Depends(require_any_role), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_cart(user.id)
    except ShopError as e:
        raise to_http(e)


@router.post("/add", response_model=CartOut)
def add_item(
    payload: ItemIn,
    user: UserModel = Depends(require_any_role),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_product(
            user_id=user.id,
            product_id=payload.product_id,
            quantity=payload.quantity,
        )
    except ShopError as e:
        raise to_http(e)


@router.put("/update", response_model=CartOut)
def update_item(
    payload: ItemIn,
    user: UserModel = Depends(require_any_role),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_quantity(user.id, payload.product_id, payload.quantity)
    except ShopError as e:
        raise to_http(e)


@router.delete("/remove/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    user: UserModel = Depends(require_any_role),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_product(user.id, product_id)
    except ShopError as e:
        raise to_http(e)


@router.delete("/clear", response_model=CartOut)
def clear_cart(user: UserModel = Depends(require_any_role), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.clear_cart(user.id)
    except ShopError as e:
        raise to_http(e)

# app/api/routers/products.py
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from app.api.deps import require_admin, require_any_role, to_http
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.errors import ShopError
from app.domain.schemas import ProductOut, ProductStatusIn
from app.services.product_service import ProductService

router = APIRouter(prefix="/product", tags=["product"])


@router.get("/", response_model=List[ProductOut])
def list_products(_: UserModel = Depends(require_any_role), db: Session = Depends(get_db)):
    return ProductService(db).list_products()


@router.get("/search", response_model=List[ProductOut])
def search_products(
    query: str | None = Query(None),
    _: UserModel = Depends(require_any_role),
    db: Session = Depends(get_db),
):
    try:
        return ProductService(db).search_products(query)
    except ShopError as e:
        raise to_http(e)


@router.get("/top-selling", response_model=List[ProductOut])
def top_selling(_: UserModel = Depends(require_any_role), db: Session = Depends(get_db)):
    return ProductService(db).top_selling()


@router.get("/search/{product_id}", response_model=ProductOut)
def get_product(product_id: int, _: UserModel = Depends(require_any_role), db: Session = Depends(get_db)):
    try:
        return ProductService(db).get_product(product_id)
    except ShopError as e:
        raise to_http(e)


@router.post("/addProduct", response_model=ProductOut, status_code=201)
def add_product(
    name: str = Form(..., min_length=1, max_length=200),
    description: str = Form(..., min_length=1),
    price: Decimal = Form(..., ge=0),
    stock: int = Form(..., ge=0),
    category_id: int = Form(..., gt=0),
    image: UploadFile | None = File(None),
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return ProductService(db).add_product(name, description, price, stock, category_id, image)
    except ShopError as e:
        raise to_http(e)


@router.put("/updateProduct/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    name: str | None = Form(None, min_length=1, max_length=200),
    description: str | None = Form(None, min_length=1),
    price: Decimal | None = Form(None, ge=0),
    stock: int | None = Form(None, ge=0),
    category_id: int | None = Form(None, gt=0),
    image: UploadFile | None = File(None),
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    fields = {
        "name": name,
        "description": description,
        "price": price,
        "stock": stock,
        "category_id": category_id,
    }
    try:
        return ProductService(db).update_product(product_id, fields, image)
    except ShopError as e:
        raise to_http(e)


@router.patch("/deleteProduct/{product_id}", response_model=ProductOut)
def set_product_status(
    product_id: int,
    payload: ProductStatusIn,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return ProductService(db).set_status(product_id, payload.is_active)
    except ShopError as e:
        raise to_http(e)

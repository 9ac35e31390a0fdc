# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import List
from decimal import Decimal
from datetime import datetime

from app.domain.enums import Role, InvoiceStatus


# =====================================================
# USERS / AUTH
# =====================================================
class RegisterIn(BaseModel):
    """Schema dla rejestracji klienta. Pole role jest odrzucane przez serwis."""

    name: str = Field(..., min_length=3, max_length=100)
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: str | None = None


class LoginIn(BaseModel):
    email: EmailStr | None = None
    username: str | None = None
    password: str = Field(..., min_length=1)


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    profile_picture: str | None = None


class UserUpdateIn(BaseModel):
    """Czesciowa aktualizacja profilu - tylko przekazane pola."""

    name: str | None = Field(None, min_length=3, max_length=100)
    username: str | None = Field(None, min_length=3, max_length=50)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=6)
    role: str | None = None


class RoleIn(BaseModel):
    role: Role


class UserRead(BaseModel):
    """Schema dla użytkownika (response)."""

    id: int
    name: str
    username: str
    email: str
    role: Role
    is_active: bool
    profile_picture: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# CATALOG
# =====================================================
class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)


class CategoryUpdateIn(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1, max_length=500)


class CategoryOut(BaseModel):
    id: int
    name: str
    description: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    stock: int
    sold: int
    image: str | None = None
    is_active: bool
    category_id: int
    category: CategoryOut | None = None

    model_config = ConfigDict(from_attributes=True)


class ProductStatusIn(BaseModel):
    is_active: bool


# =====================================================
# CART
# =====================================================
class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(..., gt=0, description="Ilość produktu (musi być > 0)")


class CartItemOut(BaseModel):
    """Schema dla produktu w koszyku (response)."""

    product_id: int
    quantity: int
    price: Decimal
    product: ProductOut | None = None

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    id: int
    user_id: int
    items: List[CartItemOut]
    total: Decimal

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# INVOICES
# =====================================================
class InvoiceLineIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class InvoiceCreate(BaseModel):
    """Reczne wystawienie faktury przez admina."""

    user_id: int = Field(..., gt=0)
    products: List[InvoiceLineIn] = Field(..., min_length=1)


class InvoiceStatusIn(BaseModel):
    invoice_id: int = Field(..., gt=0)
    status: InvoiceStatus


class InvoiceItemOut(BaseModel):
    product_id: int
    quantity: int
    price: Decimal
    product: ProductOut | None = None

    model_config = ConfigDict(from_attributes=True)


class InvoiceOut(BaseModel):
    """Schema dla faktury (response)."""

    id: int
    user_id: int
    user: UserRead | None = None
    status: InvoiceStatus
    total: Decimal
    items: List[InvoiceItemOut]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

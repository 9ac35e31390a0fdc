# app/api/routers/invoices.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import require_admin, require_any_role, to_http
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.errors import ShopError
from app.domain.schemas import InvoiceCreate, InvoiceOut, InvoiceStatusIn
from app.services.checkout_service import CheckoutService
from app.services.invoice_service import InvoiceService

router = APIRouter(prefix="/invoice", tags=["invoice"])


@router.post("/create", response_model=InvoiceOut, status_code=201)
def create_invoice(
    payload: InvoiceCreate,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Reczne wystawienie faktury PENDING dla wskazanego usera.
    Ceny z katalogu, stany zdejmowane w tej samej transakcji.
    """
    svc = CheckoutService(db)
    try:
        return svc.create_invoice(
            payload.user_id,
            [(line.product_id, line.quantity) for line in payload.products],
        )
    except ShopError as e:
        raise to_http(e)


@router.get("/", response_model=List[InvoiceOut])
def list_invoices(_: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    return InvoiceService(db).list_invoices()


@router.get("/user", response_model=List[InvoiceOut])
def list_my_invoices(user: UserModel = Depends(require_any_role), db: Session = Depends(get_db)):
    return InvoiceService(db).list_user_invoices(user.id)


@router.put("/update", response_model=InvoiceOut)
def update_invoice_status(
    payload: InvoiceStatusIn,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return InvoiceService(db).update_status(payload.invoice_id, payload.status)
    except ShopError as e:
        raise to_http(e)


@router.delete("/delete/{invoice_id}", response_model=InvoiceOut)
def cancel_invoice(invoice_id: int, _: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        return InvoiceService(db).cancel_invoice(invoice_id)
    except ShopError as e:
        raise to_http(e)

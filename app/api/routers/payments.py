# app/api/routers/payments.py
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
import io

from app.api.deps import get_lock_service, require_any_role, to_http
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.errors import ShopError
from app.services.checkout_service import CheckoutService
from app.services.lock_service import LockService
from app.services.receipt_service import ReceiptService
from app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/payment", tags=["payment"])


@router.post("/create", status_code=201, response_class=StreamingResponse)
def create_payment(
    user: UserModel = Depends(require_any_role),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    """
    Platnosc za koszyk wywolujacego: faktura PAID, stany zdjete, koszyk wyczyszczony.
    Odpowiedz to PDF z paragonem.
    """
    svc = CheckoutService(db, lock_service=lock_service)
    try:
        invoice = svc.pay_cart(user.id)
    except ShopError as e:
        raise to_http(e)

    try:
        pdf = ReceiptService().render(invoice, user)
    except Exception:
        # faktura jest juz oplacona, brakuje tylko paragonu
        logger.exception(f"Nie udalo sie wygenerowac paragonu dla oplaconej faktury {invoice.id}")
        raise

    return StreamingResponse(
        io.BytesIO(pdf),
        status_code=201,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="receipt-{invoice.id}.pdf"'},
    )

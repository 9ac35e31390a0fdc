# app/services/invoice_service.py
from sqlalchemy.orm import Session

from app.data.models.invoice import InvoiceModel
from app.repos.invoice_repo import InvoiceRepo
from app.repos.product_repo import ProductRepo
from app.domain.enums import InvoiceStatus, INVOICE_TRANSITIONS
from app.domain.errors import InvoiceStateError, NotFoundError
from app.services.notification_service import NotificationService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class InvoiceService:
    """
    Serwis odpowiedzialny za odczyt faktur i zmiany statusu.
    Tworzenie faktur jest w CheckoutService.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.repo = InvoiceRepo(db)
        self.product_repo = ProductRepo(db)
        self.notification_service = notification_service or NotificationService()

    def get_invoice(self, invoice_id: int) -> InvoiceModel:
        invoice = self.repo.get_invoice(invoice_id)

        if not invoice:
            raise NotFoundError("Faktura nie istnieje")

        return invoice

    def list_invoices(self) -> list[InvoiceModel]:
        return self.repo.list_invoices()

    def list_user_invoices(self, user_id: int) -> list[InvoiceModel]:
        return self.repo.list_by_user(user_id)

    def update_status(self, invoice_id: int, status: InvoiceStatus) -> InvoiceModel:
        """
        Zmiana statusu przez admina. Bez ponownej walidacji stanow magazynowych.
        PENDING -> CANCELLED idzie przez cancel_invoice, zeby oddac stany.
        """
        invoice = self.get_invoice(invoice_id)
        current = InvoiceStatus(invoice.status)

        if status == current:
            return invoice

        if status not in INVOICE_TRANSITIONS[current]:
            raise InvoiceStateError(
                f"Niedozwolona zmiana statusu faktury {current.value} -> {status.value}"
            )

        if status == InvoiceStatus.CANCELLED:
            return self.cancel_invoice(invoice_id)

        invoice.status = status.value
        self.repo.commit()

        logger.info(f"Faktura {invoice_id}: {current.value} -> {status.value}")
        self.notification_service.send_invoice_notification(invoice.user_id, invoice.id, invoice.status)

        return self.get_invoice(invoice_id)

    def cancel_invoice(self, invoice_id: int) -> InvoiceModel:
        """
        Anulowanie faktury PENDING - odwrotnosc checkoutu:
        kazda pozycja wraca na stan produktu (i schodzi z licznika sold).
        """
        invoice = self.get_invoice(invoice_id)

        if invoice.status == InvoiceStatus.CANCELLED.value:
            raise InvoiceStateError("Faktura jest juz anulowana")

        if invoice.status == InvoiceStatus.PAID.value:
            raise InvoiceStateError("Nie mozna anulowac oplaconej faktury")

        try:
            invoice.status = InvoiceStatus.CANCELLED.value
            for item in invoice.items:
                self.product_repo.restore_stock(item.product_id, item.quantity)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            logger.exception(f"CANCEL ROLLBACK faktura {invoice_id}: status i stany cofniete")
            raise

        logger.info(f"Faktura {invoice_id} anulowana, stany przywrocone ({len(invoice.items)} pozycji)")
        self.notification_service.send_invoice_notification(invoice.user_id, invoice.id, invoice.status)

        return self.get_invoice(invoice_id)

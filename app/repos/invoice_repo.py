# app/repos/invoice_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.data.models.invoice import InvoiceModel
from app.data.models.invoice_item import InvoiceItemModel
from app.data.models.product import ProductModel


# pozycje z produktem (i jego kategoria) oraz kupujacy - odpowiedz rozwija je w calosci
_INVOICE_LOADERS = (
    selectinload(InvoiceModel.items)
    .selectinload(InvoiceItemModel.product)
    .selectinload(ProductModel.category),
    selectinload(InvoiceModel.user),
)


class InvoiceRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_invoice(self, invoice: InvoiceModel) -> InvoiceModel:
        # flush bez commita - faktura jest czescia wiekszej transakcji checkoutu
        self.db.add(invoice)
        self.db.flush()
        return invoice

    def get_invoice(self, invoice_id: int) -> InvoiceModel | None:
        return self.db.execute(
            select(InvoiceModel)
            .options(*_INVOICE_LOADERS)
            .where(InvoiceModel.id == invoice_id)
        ).scalar_one_or_none()

    def list_invoices(self) -> list[InvoiceModel]:
        return list(
            self.db.execute(
                select(InvoiceModel)
                .options(*_INVOICE_LOADERS)
                .order_by(InvoiceModel.created_at.desc(), InvoiceModel.id.desc())
            ).scalars()
        )

    def list_by_user(self, user_id: int) -> list[InvoiceModel]:
        return list(
            self.db.execute(
                select(InvoiceModel)
                .options(*_INVOICE_LOADERS)
                .where(InvoiceModel.user_id == user_id)
                .order_by(InvoiceModel.created_at.desc(), InvoiceModel.id.desc())
            ).scalars()
        )

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

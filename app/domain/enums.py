# app/domain/enums.py
from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    CLIENT = "CLIENT"


class InvoiceStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


# PAID i CANCELLED sa stanami koncowymi
INVOICE_TRANSITIONS = {
    InvoiceStatus.PENDING: {InvoiceStatus.PAID, InvoiceStatus.CANCELLED},
    InvoiceStatus.PAID: set(),
    InvoiceStatus.CANCELLED: set(),
}

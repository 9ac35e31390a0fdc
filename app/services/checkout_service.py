# app/services/checkout_service.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.invoice import InvoiceModel
from app.data.models.invoice_item import InvoiceItemModel
from app.data.models.product import ProductModel
from app.repos.cart_repo import CartRepo
from app.repos.invoice_repo import InvoiceRepo
from app.repos.product_repo import ProductRepo
from app.repos.user_repo import UserRepo
from app.domain.enums import InvoiceStatus
from app.domain.errors import (
    ConflictError,
    EmptyCartError,
    InsufficientStockError,
    NotFoundError,
    ProductUnavailableError,
    ShopError,
)
from app.services.lock_service import LockService
from app.services.notification_service import NotificationService
from app.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)

_CENT = Decimal("0.01")


@dataclass
class PricedLine:
    product: ProductModel
    quantity: int
    price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class CheckoutService:
    """
    Zamiana koszyka / listy produktow w fakture.

    Dwa wejscia:
    - create_invoice: admin wystawia fakture PENDING z dowolnej listy produktow
    - pay_cart: klient placi za swoj koszyk, faktura od razu PAID, koszyk czyszczony

    Oba przechodza te sama sciezke: walidacja wszystkich linii (produkt istnieje,
    jest aktywny, stan >= ilosc) po aktualnych cenach katalogowych, a dopiero potem
    jedna transakcja: insert faktury + warunkowe zdjecie stanow + czyszczenie koszyka.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.invoice_repo = InvoiceRepo(db)
        self.product_repo = ProductRepo(db)
        self.cart_repo = CartRepo(db)
        self.user_repo = UserRepo(db)
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    # =====================================================
    # ENTRY POINT A - reczna faktura (admin)
    # =====================================================
    def create_invoice(self, user_id: int, lines: Iterable[Tuple[int, int]]) -> InvoiceModel:
        if not self.user_repo.get_user(user_id):
            raise NotFoundError(f"Uzytkownik o ID {user_id} nie istnieje")

        requested = self._merge_lines(lines)
        priced = self._price_lines(requested)

        invoice = self._persist(user_id, priced, InvoiceStatus.PENDING)

        logger.info(f"Faktura {invoice.id} (PENDING) wystawiona dla usera {user_id}, total {invoice.total}")
        self.notification_service.send_invoice_notification(user_id, invoice.id, invoice.status)

        return invoice

    # =====================================================
    # ENTRY POINT B - platnosc za koszyk (klient)
    # =====================================================
    def pay_cart(self, user_id: int) -> InvoiceModel:
        token = self._acquire_lock(user_id)
        try:
            cart = self.cart_repo.get_cart_with_products(user_id)

            if not cart:
                raise NotFoundError("Koszyk nie znaleziony")

            if not cart.items:
                raise EmptyCartError()

            requested = {item.product_id: item.quantity for item in cart.items}
            priced = self._price_lines(requested)

            invoice = self._persist(user_id, priced, InvoiceStatus.PAID, cart=cart)
        finally:
            self._release_lock(user_id, token)

        logger.info(f"Platnosc przyjeta: faktura {invoice.id} (PAID) dla usera {user_id}, total {invoice.total}")
        self.notification_service.send_invoice_notification(user_id, invoice.id, invoice.status)

        return invoice

    # =====================================================
    # helpers
    # =====================================================
    @staticmethod
    def _merge_lines(lines: Iterable[Tuple[int, int]]) -> Dict[int, int]:
        # ten sam produkt kilka razy w zadaniu -> jedna linia z suma ilosci
        merged: Dict[int, int] = {}
        for product_id, quantity in lines:
            merged[product_id] = merged.get(product_id, 0) + quantity
        return merged

    def _price_lines(self, requested: Dict[int, int]) -> List[PricedLine]:
        """Etap decyzji - nic nie zapisuje, pierwszy blad przerywa checkout."""
        priced = []
        for product_id, quantity in requested.items():
            product = self.product_repo.get_product(product_id)

            if not product:
                raise NotFoundError(f"Produkt o ID {product_id} nie istnieje")

            if not product.is_active:
                raise ProductUnavailableError(f"Produkt {product.name} nie jest dostepny")

            if product.stock < quantity:
                logger.warning(
                    f"Brak stanu dla produktu {product_id}: dostepne {product.stock}, zadane {quantity}"
                )
                raise InsufficientStockError(product.name, product.stock, quantity)

            # zawsze aktualna cena katalogowa, nie snapshot z koszyka
            priced.append(PricedLine(product=product, quantity=quantity, price=Decimal(product.price)))

        return priced

    def _persist(
        self,
        user_id: int,
        priced: List[PricedLine],
        status: InvoiceStatus,
        cart: CartModel | None = None,
    ) -> InvoiceModel:
        total = sum((line.line_total for line in priced), Decimal("0.00")).quantize(_CENT)

        invoice = InvoiceModel(
            user_id=user_id,
            status=status.value,
            total=total,
            items=[
                InvoiceItemModel(product_id=line.product.id, quantity=line.quantity, price=line.price)
                for line in priced
            ],
        )

        try:
            self.invoice_repo.add_invoice(invoice)

            for line in priced:
                # warunkowy update - rownolegly checkout mogl zdjac stan po walidacji
                if self.product_repo.decrement_stock(line.product.id, line.quantity) == 0:
                    logger.warning(
                        f"Stan produktu {line.product.id} zmienil sie w trakcie checkoutu usera {user_id}"
                    )
                    raise InsufficientStockError(line.product.name, line.product.stock, line.quantity)

            if cart is not None:
                cart.clear()
                rowcount = self.cart_repo.update_cart_version(
                    cart_id=cart.id,
                    old_version=cart.version,
                    new_data={"version": cart.version + 1},
                )
                if rowcount == 0:
                    raise ConflictError(
                        "Konflikt wspolbieznosci - koszyk zostal zmodyfikowany w trakcie platnosci"
                    )

            self.invoice_repo.commit()

        except ShopError:
            self.invoice_repo.rollback()
            raise
        except Exception:
            # faktura byla juz zflushowana - rollback cofa fakture, stany i koszyk razem
            self.invoice_repo.rollback()
            logger.exception(f"CHECKOUT ROLLBACK user={user_id} status={status.value}: faktura i stany cofniete")
            raise

        return self.invoice_repo.get_invoice(invoice.id)

    def _acquire_lock(self, user_id: int) -> str | None:
        if self.lock_service is None:
            return None

        token = self.lock_service.acquire_checkout_lock(user_id, ttl=CHECKOUT_LOCK_TTL_SECONDS)
        if not token:
            logger.warning(f"Platnosc usera {user_id} juz trwa - odrzucam kolejna")
            raise ConflictError("Platnosc dla tego koszyka jest juz w toku")
        return token

    def _release_lock(self, user_id: int, token: str | None) -> None:
        if token is None:
            return
        try:
            self.lock_service.release_checkout_lock(user_id, token)
        except Exception as e:
            # lock i tak wygasnie po TTL
            logger.warning(f"Nie udalo sie zwolnic locka checkoutu usera {user_id}: {e}")

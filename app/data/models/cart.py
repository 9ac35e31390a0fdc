#app/data/models/cart.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Numeric
from sqlalchemy.orm import relationship

from app.data.database import Base
from app.data.models.cart_item import CartItemModel
from app.domain.errors import NotFoundError

_CENT = Decimal("0.01")


class CartModel(Base):
    """
    Agregat koszyka. Linie zmieniamy wylacznie przez add_line / set_line_quantity /
    remove_line / clear - kazda z nich przelicza total od zera.
    """

    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    # jeden koszyk na usera pilnowany przez lookup przed insertem, nie constraint
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    total = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )

    def find_line(self, product_id: int) -> CartItemModel | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def add_line(self, product_id: int, quantity: int, price: Decimal) -> CartItemModel:
        # ten sam produkt -> sumujemy ilosc, cena zostaje z momentu pierwszego dodania
        line = self.find_line(product_id)
        if line:
            line.quantity += quantity
        else:
            line = CartItemModel(product_id=product_id, quantity=quantity, price=price)
            self.items.append(line)
        self._recompute_total()
        return line

    def set_line_quantity(self, product_id: int, quantity: int) -> CartItemModel:
        line = self.find_line(product_id)
        if not line:
            raise NotFoundError("Produkt nie znajduje sie w koszyku")
        line.quantity = quantity
        self._recompute_total()
        return line

    def remove_line(self, product_id: int) -> None:
        line = self.find_line(product_id)
        if not line:
            raise NotFoundError("Produkt nie znajduje sie w koszyku")
        self.items.remove(line)
        self._recompute_total()

    def clear(self) -> None:
        self.items.clear()
        self._recompute_total()

    def _recompute_total(self) -> None:
        total = sum((Decimal(i.price) * i.quantity for i in self.items), Decimal("0.00"))
        self.total = total.quantize(_CENT)

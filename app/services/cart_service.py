from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.product import ProductModel
from app.repos.cart_repo import CartRepo
from app.repos.product_repo import ProductRepo
from app.domain.errors import ConflictError, NotFoundError, ValidationError
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Prosta implementacja cqrs i proste use case dla domeny cart
    commands (create, add, update, remove, clear) modyfikuja stan
    query (get) tylko odczyt
    jeden koszyk na usera, wszystkie operacje na koszyku wywolujacego
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.product_repo = ProductRepo(db)

    #query - odczyt
    def get_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_with_products(user_id)

        if not cart:
            raise NotFoundError("Koszyk nie znaleziony")

        return cart

    #commands
    def create_cart(self, user_id: int) -> CartModel:
        #check czy user ma juz koszyk
        existing = self.repo.get_cart_by_user(user_id)

        if existing:
            logger.info(f"Uzytkownik o ID {user_id} ma juz koszyk {existing.id}")
            raise ConflictError("Koszyk juz istnieje")

        created = self.repo.create_cart(CartModel(user_id=user_id, total=0, version=1))

        logger.info(f"Utworzono nowy koszyk {created.id} dla użytkownika {user_id}")

        return self.get_cart(user_id)

    def add_product(self, user_id: int, product_id: int, quantity: int) -> CartModel:
        if quantity <= 0:
            raise ValidationError("Ilosc musi być wieksza niz 0")

        #produkt sprawdzamy zanim dotkniemy koszyka
        product = self._get_available_product(product_id)

        cart = self._get_cart_for_update(user_id)

        line = cart.find_line(product_id)
        if line:
            logger.info(
                f"Produkt {product_id} już jest w koszyku, zwiekszam ilosc "
                f"z {line.quantity} do {line.quantity + quantity}"
            )
        else:
            logger.info(f"Dodaje nowy produkt {product_id} do koszyka {cart.id} po cenie {product.price}")

        cart.add_line(product_id, quantity, product.price)

        self._commit_with_version(cart)

        logger.info(f"Produkt {product_id} dodany do koszyka {cart.id}, total: {cart.total}")

        return self.get_cart(user_id)

    def update_quantity(self, user_id: int, product_id: int, quantity: int) -> CartModel:
        if quantity <= 0:
            raise ValidationError("Ilosc musi być wieksza niz 0")

        cart = self._get_cart_for_update(user_id)

        cart.set_line_quantity(product_id, quantity)

        self._commit_with_version(cart)

        logger.info(f"Zmieniono ilosc produktu {product_id} w koszyku {cart.id} na {quantity}")

        return self.get_cart(user_id)

    def remove_product(self, user_id: int, product_id: int) -> CartModel:
        cart = self._get_cart_for_update(user_id)

        logger.info(f"Usuwanie produktu {product_id} z koszyka {cart.id}")

        cart.remove_line(product_id)

        self._commit_with_version(cart)

        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> CartModel:
        cart = self._get_cart_for_update(user_id)

        cart.clear()

        self._commit_with_version(cart)

        logger.info(f"Koszyk {cart.id} wyczyszczony")

        return self.get_cart(user_id)

    def _get_available_product(self, product_id: int) -> ProductModel:
        product = self.product_repo.get_product(product_id)
        if not product or not product.is_active:
            raise NotFoundError("Produkt nie znaleziony")
        return product

    def _get_cart_for_update(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Koszyk nie znaleziony")
        return cart

    def _commit_with_version(self, cart: CartModel) -> None:
        # Optimistic locking warunek na wersje
        # np w bazie update set version 2 where id 1 and version 1
        old_version = cart.version
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=old_version,
            new_data={"version": old_version + 1},
        )

        if rowcount == 0: #jesli tj 0 rows affected
            self.repo.rollback()
            raise ConflictError(
                "Konflikt wspolbieznosci - koszyk zostal zmodyfikowany przez inna operacje"
            )

        self.repo.commit()

# app/domain/errors.py
"""
Wyjatki domenowe. Serwisy je rzucaja, routery lapia ShopError
i zamieniaja na HTTPException z odpowiednim status_code.
"""


class ShopError(Exception):
    status_code = 400

    def __init__(self, message: str = "Blad operacji"):
        self.message = message
        super().__init__(message)


class ValidationError(ShopError):
    status_code = 400


class AuthenticationError(ShopError):
    status_code = 401


class AuthorizationError(ShopError):
    status_code = 403


class NotFoundError(ShopError):
    status_code = 404


class ConflictError(ShopError):
    status_code = 409


class DomainRuleError(ShopError):
    """Naruszenie reguly biznesowej - operacja odrzucona bez zmian."""
    status_code = 400


class InsufficientStockError(DomainRuleError):
    def __init__(self, product_name: str, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(
            f"Produkt {product_name} nie ma wystarczajacego stanu "
            f"(dostepne: {available}, zadane: {requested})"
        )


class EmptyCartError(DomainRuleError):
    def __init__(self):
        super().__init__("Koszyk jest pusty - nie mozna zrealizowac platnosci")


class InvoiceStateError(DomainRuleError):
    pass


class ProductUnavailableError(DomainRuleError):
    pass


class ForbiddenFieldError(DomainRuleError):
    pass


class ConfigurationError(ShopError):
    status_code = 500

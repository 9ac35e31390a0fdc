# app/services/product_service.py
from decimal import Decimal
from typing import Any, Dict

from fastapi import UploadFile
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel
from app.repos.category_repo import CategoryRepo
from app.repos.product_repo import ProductRepo
from app.domain.errors import NotFoundError, ValidationError
from app.utils.upload import delete_upload_file, save_upload_file
from app.utils.logging import get_logger

logger = get_logger(__name__)

TOP_SELLING_LIMIT = 5


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.category_repo = CategoryRepo(db)

    def _ensure_active_category(self, category_id: int):
        category = self.category_repo.get_category(category_id)
        if not category or not category.is_active:
            raise NotFoundError("Kategoria nie istnieje lub jest nieaktywna")
        return category

    def add_product(
        self,
        name: str,
        description: str,
        price: Decimal,
        stock: int,
        category_id: int,
        image: UploadFile | None = None,
    ) -> ProductModel:
        self._ensure_active_category(category_id)

        product = ProductModel(
            name=name,
            description=description,
            price=price,
            stock=stock,
            category_id=category_id,
            image=save_upload_file(image, "products"),
        )
        created = self.repo.create_product(product)
        logger.info(f"Utworzono produkt {created.id} ({created.name}) w kategorii {category_id}")
        return self.repo.get_with_category(created.id)

    def list_products(self) -> list[ProductModel]:
        return self.repo.list_products()

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_with_category(product_id)
        if not product:
            raise NotFoundError("Produkt nie istnieje")
        return product

    def update_product(
        self,
        product_id: int,
        fields: Dict[str, Any],
        image: UploadFile | None = None,
    ) -> ProductModel:
        """Nadpisuje tylko przekazane pola, obrazek tylko gdy przyszedl nowy plik."""
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Produkt nie istnieje")

        if fields.get("category_id") is not None:
            self._ensure_active_category(fields["category_id"])

        for key in ("name", "description", "price", "stock", "category_id"):
            if fields.get(key) is not None:
                setattr(product, key, fields[key])

        new_image = save_upload_file(image, "products")
        old_image = product.image if new_image else None
        if new_image:
            product.image = new_image

        self.repo.save(product)

        # stary plik dopiero po udanym commicie
        if old_image and old_image != new_image:
            delete_upload_file(old_image)

        logger.info(f"Zaktualizowano produkt {product_id}: {sorted(k for k, v in fields.items() if v is not None)}")
        return self.repo.get_with_category(product_id)

    def search_products(self, query: str | None) -> list[ProductModel]:
        if not query or not query.strip():
            raise ValidationError("Podaj fraze wyszukiwania")
        return self.repo.search_by_name(query.strip())

    def top_selling(self) -> list[ProductModel]:
        return self.repo.top_selling(TOP_SELLING_LIMIT)

    def set_status(self, product_id: int, is_active: bool) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Produkt nie istnieje")

        product.is_active = is_active
        self.repo.save(product)
        logger.info(f"Produkt {product_id} {'aktywowany' if is_active else 'dezaktywowany'}")
        return self.repo.get_with_category(product_id)

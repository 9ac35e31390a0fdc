# app/repos/product_repo.py
from sqlalchemy import select, update, case, func
from sqlalchemy.orm import Session, joinedload

from app.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_with_category(self, product_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel)
            .options(joinedload(ProductModel.category))
            .where(ProductModel.id == product_id)
        ).scalar_one_or_none()

    def list_products(self) -> list[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .options(joinedload(ProductModel.category))
                .order_by(ProductModel.id)
            ).scalars()
        )

    def search_by_name(self, term: str) -> list[ProductModel]:
        # case-insensitive substring, % i _ z zapytania traktowane doslownie
        return list(
            self.db.execute(
                select(ProductModel)
                .options(joinedload(ProductModel.category))
                .where(func.lower(ProductModel.name).contains(term.lower(), autoescape=True))
                .order_by(ProductModel.id)
            ).scalars()
        )

    def top_selling(self, limit: int = 5) -> list[ProductModel]:
        # remisy rozstrzyga kolejnosc wstawienia (id)
        return list(
            self.db.execute(
                select(ProductModel)
                .options(joinedload(ProductModel.category))
                .order_by(ProductModel.sold.desc(), ProductModel.id.asc())
                .limit(limit)
            ).scalars()
        )

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def reassign_category(self, from_category_id: int, to_category_id: int) -> int:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.category_id == from_category_id)
            .values(category_id=to_category_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        """
        Warunkowy update: zdejmuje stan tylko gdy stock >= quantity.
        Zwraca rowcount - 0 oznacza ze ktos nas wyprzedzil.
        Nie commituje, wywolujacy zarzadza transakcja.
        """
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(
                stock=ProductModel.stock - quantity,
                sold=ProductModel.sold + quantity,
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def restore_stock(self, product_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(
                stock=ProductModel.stock + quantity,
                sold=case((ProductModel.sold >= quantity, ProductModel.sold - quantity), else_=0),
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

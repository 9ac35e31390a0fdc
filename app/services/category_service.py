# app/services/category_service.py
from sqlalchemy.orm import Session

from app.data.models.category import CategoryModel
from app.repos.category_repo import CategoryRepo
from app.repos.product_repo import ProductRepo
from app.domain.errors import ConflictError, ConfigurationError, DomainRuleError, NotFoundError
from app.domain.schemas import CategoryIn, CategoryUpdateIn
from app.utils.settings import DEFAULT_CATEGORY_ID
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CategoryService:
    def __init__(self, db: Session, fallback_category_id: int | None = None):
        self.repo = CategoryRepo(db)
        self.product_repo = ProductRepo(db)
        self.fallback_category_id = fallback_category_id or DEFAULT_CATEGORY_ID

    def _get_active(self, category_id: int) -> CategoryModel:
        category = self.repo.get_category(category_id)
        if not category or not category.is_active:
            raise NotFoundError("Kategoria nie istnieje lub jest nieaktywna")
        return category

    def add_category(self, payload: CategoryIn) -> CategoryModel:
        if self.repo.get_by_name(payload.name):
            raise ConflictError("Kategoria o tej nazwie juz istnieje")

        created = self.repo.create_category(
            CategoryModel(name=payload.name, description=payload.description)
        )
        logger.info(f"Utworzono kategorie {created.id} ({created.name})")
        return created

    def list_categories(self) -> list[CategoryModel]:
        return self.repo.list_active()

    def get_category(self, category_id: int) -> CategoryModel:
        return self._get_active(category_id)

    def update_category(self, category_id: int, payload: CategoryUpdateIn) -> CategoryModel:
        category = self._get_active(category_id)

        if payload.name and payload.name != category.name:
            if self.repo.get_by_name(payload.name):
                raise ConflictError("Kategoria o tej nazwie juz istnieje")
            category.name = payload.name
        if payload.description:
            category.description = payload.description

        return self.repo.save(category)

    def deactivate_category(self, category_id: int) -> CategoryModel:
        """
        Dezaktywuje kategorie i przepina jej produkty do kategorii domyslnej.

        Dezaktywacja jest commitowana przed przepieciem produktow - brak kategorii
        domyslnej konczy sie ConfigurationError, ale kategoria zostaje wylaczona.
        """
        category = self._get_active(category_id)

        if category.id == self.fallback_category_id:
            raise DomainRuleError("Nie mozna dezaktywowac kategorii domyslnej")

        category.is_active = False
        self.repo.save(category)
        logger.info(f"Kategoria {category_id} dezaktywowana")

        fallback = self.repo.get_category(self.fallback_category_id)
        if not fallback or not fallback.is_active:
            logger.error(
                f"Kategoria domyslna {self.fallback_category_id} nie istnieje lub jest nieaktywna - "
                f"produkty kategorii {category_id} nie zostaly przepiete"
            )
            raise ConfigurationError(
                "Kategoria domyslna nie istnieje. Utworz ja przed dezaktywacja kategorii."
            )

        moved = self.product_repo.reassign_category(category_id, fallback.id)
        self.repo.save(category)
        logger.info(f"Przepieto {moved} produktow z kategorii {category_id} do {fallback.id}")
        return category

    def activate_category(self, category_id: int) -> CategoryModel:
        category = self.repo.get_category(category_id)
        if not category:
            raise NotFoundError("Kategoria nie istnieje")

        category.is_active = True
        return self.repo.save(category)

"""Category and product management.

Reads are open to everyone; every write takes an admin. Rows referenced from
elsewhere cannot be deleted: a category with products, or a product that any
deal was ever opened on (deals are never deleted).
"""

from loguru import logger
from sqlmodel import Session

from src.splicer.core.errors import (
    CategoryInUse,
    CategoryNotFound,
    DuplicateName,
    NotAuthorized,
    ProductInUse,
    ProductUnavailable,
)
from src.splicer.core.models.forms import CategoryForm, ProductForm
from src.splicer.core.services.database.db_session import DbSessionService
from src.splicer.core.services.database.db_utils import run_in_transaction
from src.splicer.entities.core.user.entity import User
from src.splicer.entities.service.category.entity import Category
from src.splicer.entities.service.category.repository import CategoryRepository
from src.splicer.entities.service.product.entity import Product
from src.splicer.entities.service.product.repository import ProductRepository


def _require_admin(actor: User) -> None:
    if not actor.is_admin:
        raise NotAuthorized("Only administrators can manage the catalog.")


def _load_category(repo: CategoryRepository, category_id: str) -> Category:
    category = repo.get(category_id)
    if category is None:
        raise CategoryNotFound("Category not found.")
    return category


def _load_product(repo: ProductRepository, product_id: str) -> Product:
    product = repo.get(product_id)
    if product is None:
        raise ProductUnavailable("Product not found.")
    return product


def _check_unique_name(
    repo: CategoryRepository, name: str, category_id: str | None = None
) -> None:
    clash = repo.get_by_name(name)
    if clash is not None and clash.id != category_id:
        message = "A category with this name already exists."
        raise DuplicateName(message, errors={"name": [message]})


def _check_category(session: Session, category_id: str) -> None:
    if CategoryRepository(session).get(category_id) is None:
        message = "Please select a valid category."
        raise CategoryNotFound(message, errors={"category_id": [message]})


class CatalogService:
    def __init__(self, db: DbSessionService):
        self._db = db

    # ---------------------------- categories --------------------------------

    def list_categories(self, active_only: bool = False) -> list[Category]:
        return run_in_transaction(
            self._db,
            lambda s: CategoryRepository(s).list_all(active_only=active_only),
            action="fetch categories",
        )

    def get_category(self, category_id: str) -> Category:
        return run_in_transaction(
            self._db,
            lambda s: _load_category(CategoryRepository(s), category_id),
            action="fetch category",
        )

    def create_category(self, form: CategoryForm, actor: User) -> Category:
        _require_admin(actor)

        def work(session: Session) -> Category:
            repo = CategoryRepository(session)
            _check_unique_name(repo, form.name)
            return repo.create(Category(**form.model_dump()))

        category = run_in_transaction(self._db, work, action="create category")
        logger.info("User {} created category {} ({})", actor.id, category.id, category.name)
        return category

    def update_category(
        self, category_id: str, form: CategoryForm, actor: User
    ) -> Category:
        _require_admin(actor)

        def work(session: Session) -> Category:
            repo = CategoryRepository(session)
            category = _load_category(repo, category_id)
            _check_unique_name(repo, form.name, category.id)
            return repo.update(category.model_copy(update=form.model_dump()))

        return run_in_transaction(self._db, work, action="update category")

    def set_category_active(
        self, category_id: str, is_active: bool, actor: User
    ) -> Category:
        _require_admin(actor)

        def work(session: Session) -> Category:
            repo = CategoryRepository(session)
            category = _load_category(repo, category_id)
            return repo.update(category.model_copy(update={"is_active": is_active}))

        return run_in_transaction(self._db, work, action="update category status")

    def delete_category(self, category_id: str, actor: User) -> None:
        _require_admin(actor)

        def work(session: Session) -> None:
            repo = CategoryRepository(session)
            category = _load_category(repo, category_id)
            if repo.count_products(category.id) > 0:
                raise CategoryInUse(
                    "Cannot delete category with products. Move or delete products first."
                )
            repo.delete(category.id)

        run_in_transaction(self._db, work, action="delete category")
        logger.info("User {} deleted category {}", actor.id, category_id)

    # ----------------------------- products ---------------------------------

    def list_products(
        self, active_only: bool = False, category_id: str | None = None
    ) -> list[Product]:
        return run_in_transaction(
            self._db,
            lambda s: ProductRepository(s).list_all(
                active_only=active_only, category_id=category_id
            ),
            action="fetch products",
        )

    def get_product(self, product_id: str) -> Product:
        return run_in_transaction(
            self._db,
            lambda s: _load_product(ProductRepository(s), product_id),
            action="fetch product",
        )

    def create_product(self, form: ProductForm, actor: User) -> Product:
        _require_admin(actor)

        def work(session: Session) -> Product:
            _check_category(session, form.category_id)
            return ProductRepository(session).create(
                Product(**form.model_dump(), created_by=actor.id)
            )

        product = run_in_transaction(self._db, work, action="create product")
        logger.info("User {} created product {} ({})", actor.id, product.id, product.name)
        return product

    def update_product(self, product_id: str, form: ProductForm, actor: User) -> Product:
        _require_admin(actor)

        def work(session: Session) -> Product:
            repo = ProductRepository(session)
            product = _load_product(repo, product_id)
            _check_category(session, form.category_id)
            return repo.update(product.model_copy(update=form.model_dump()))

        return run_in_transaction(self._db, work, action="update product")

    def set_product_active(self, product_id: str, is_active: bool, actor: User) -> Product:
        _require_admin(actor)

        def work(session: Session) -> Product:
            repo = ProductRepository(session)
            product = _load_product(repo, product_id)
            return repo.update(product.model_copy(update={"is_active": is_active}))

        return run_in_transaction(self._db, work, action="update product status")

    def delete_product(self, product_id: str, actor: User) -> None:
        _require_admin(actor)

        def work(session: Session) -> None:
            repo = ProductRepository(session)
            product = _load_product(repo, product_id)
            if repo.count_deals(product.id) > 0:
                raise ProductInUse(
                    "Cannot delete a product that group deals were opened on. "
                    "Deactivate it instead."
                )
            repo.delete(product.id)

        run_in_transaction(self._db, work, action="delete product")
        logger.info("User {} deleted product {}", actor.id, product_id)

"""Unit tests for category and product management."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from src.splicer.core.errors import (
    CategoryInUse,
    CategoryNotFound,
    DuplicateName,
    NotAuthorized,
    ProductInUse,
    ProductUnavailable,
    StoreError,
)
from src.splicer.core.models import CategoryForm, ProductForm
from src.splicer.entities.service.category import CategoryRepository


def product_form(category_id: str, **overrides) -> ProductForm:
    data = {
        "name": "Chef knife",
        "description": "Eight inch forged steel blade",
        "category_id": category_id,
        "base_price": "59.90",
        "max_participants": 50,
        "specifications": {"steel": "VG-10"},
    }
    data.update(overrides)
    return ProductForm.model_validate(data)


class TestCategories:
    def test_create_and_list(self, catalog, admin):
        catalog.create_category(CategoryForm(name="Garden"), admin)
        catalog.create_category(CategoryForm(name="Books"), admin)

        assert [c.name for c in catalog.list_categories()] == ["Books", "Garden"]

    def test_non_admin_is_rejected(self, catalog, alice):
        with pytest.raises(NotAuthorized) as exc_info:
            catalog.create_category(CategoryForm(name="Garden"), alice)
        assert exc_info.value.status_code == 403
        assert catalog.list_categories() == []

    def test_duplicate_name(self, catalog, admin, category):
        with pytest.raises(DuplicateName) as exc_info:
            catalog.create_category(CategoryForm(name=category.name), admin)
        assert list(exc_info.value.errors) == ["name"]

    def test_update_keeps_own_name(self, catalog, admin, category):
        updated = catalog.update_category(
            category.id,
            CategoryForm(name=category.name, description="Cookware"),
            admin,
        )
        assert updated.description == "Cookware"

    def test_deactivate_hides_from_active_list(self, catalog, admin, category):
        catalog.set_category_active(category.id, False, admin)

        assert catalog.list_categories(active_only=True) == []
        assert catalog.get_category(category.id).is_active is False

    def test_delete_with_products_is_blocked(self, catalog, admin, category, product):
        with pytest.raises(CategoryInUse) as exc_info:
            catalog.delete_category(category.id, admin)
        assert exc_info.value.message == (
            "Cannot delete category with products. Move or delete products first."
        )

    def test_delete_empty_category(self, catalog, admin, category):
        catalog.delete_category(category.id, admin)

        with pytest.raises(CategoryNotFound):
            catalog.get_category(category.id)

    def test_database_failure_message(self, monkeypatch, catalog):
        def broken(self, active_only=False):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(CategoryRepository, "list_all", broken)

        with pytest.raises(StoreError) as exc_info:
            catalog.list_categories()
        assert exc_info.value.message == "Database Error: Failed to fetch categories."


class TestProducts:
    def test_create_product(self, catalog, admin, category):
        product = catalog.create_product(product_form(category.id), admin)

        assert product.base_price == Decimal("59.90")
        assert product.created_by == admin.id
        assert catalog.get_product(product.id).specifications == {"steel": "VG-10"}

    def test_create_in_unknown_category(self, catalog, admin):
        form = product_form("00000000-0000-0000-0000-000000000000")
        with pytest.raises(CategoryNotFound) as exc_info:
            catalog.create_product(form, admin)
        assert exc_info.value.errors == {"category_id": ["Please select a valid category."]}

    def test_update_and_filter(self, catalog, admin, category, product):
        catalog.update_product(
            product.id, product_form(category.id, name="Paring knife"), admin
        )
        catalog.set_product_active(product.id, False, admin)

        assert catalog.get_product(product.id).name == "Paring knife"
        assert catalog.list_products(active_only=True) == []
        assert len(catalog.list_products(category_id=category.id)) == 1

    def test_delete_product_with_deal_is_blocked(
        self, catalog, admin, product, open_deal
    ):
        with pytest.raises(ProductInUse):
            catalog.delete_product(product.id, admin)

    def test_delete_product(self, catalog, admin, product):
        catalog.delete_product(product.id, admin)
        with pytest.raises(ProductUnavailable):
            catalog.get_product(product.id)

    def test_non_admin_cannot_touch_products(self, catalog, alice, category, product):
        with pytest.raises(NotAuthorized):
            catalog.create_product(product_form(category.id), alice)
        with pytest.raises(NotAuthorized):
            catalog.delete_product(product.id, alice)

"""Product API router."""

from fastapi import APIRouter, Depends

from src.splicer.api.http.deps import get_catalog_service, require_role
from src.splicer.api.http.routers.service.category import StatusUpdate
from src.splicer.core.models.forms import ProductForm
from src.splicer.core.services import CatalogService
from src.splicer.entities.core.user import User
from src.splicer.entities.service.product import Product

router = APIRouter()

admin_only = require_role("admin")


@router.get("/", response_model=list[Product])
def list_products(
    active_only: bool = False,
    category_id: str | None = None,
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[Product]:
    return catalog.list_products(active_only=active_only, category_id=category_id)


@router.get("/{product_id}", response_model=Product)
def get_product(
    product_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Product:
    return catalog.get_product(product_id)


@router.post("/", response_model=Product, status_code=201)
def create_product(
    form: ProductForm,
    user: User = Depends(admin_only),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Product:
    return catalog.create_product(form, user)


@router.put("/{product_id}", response_model=Product)
def update_product(
    product_id: str,
    form: ProductForm,
    user: User = Depends(admin_only),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Product:
    return catalog.update_product(product_id, form, user)


@router.patch("/{product_id}/status", response_model=Product)
def set_product_status(
    product_id: str,
    body: StatusUpdate,
    user: User = Depends(admin_only),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Product:
    return catalog.set_product_active(product_id, body.is_active, user)


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    user: User = Depends(admin_only),
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict[str, str]:
    catalog.delete_product(product_id, user)
    return {"message": "Product deleted successfully."}

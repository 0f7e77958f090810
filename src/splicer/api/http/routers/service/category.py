"""Category API router."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.splicer.api.http.deps import get_catalog_service, require_role
from src.splicer.core.models.forms import CategoryForm
from src.splicer.core.services import CatalogService
from src.splicer.entities.core.user import User
from src.splicer.entities.service.category import Category

router = APIRouter()

admin_only = require_role("admin")


class StatusUpdate(BaseModel):
    is_active: bool


@router.get("/", response_model=list[Category])
def list_categories(
    active_only: bool = False,
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[Category]:
    return catalog.list_categories(active_only=active_only)


@router.get("/{category_id}", response_model=Category)
def get_category(
    category_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Category:
    return catalog.get_category(category_id)


@router.post("/", response_model=Category, status_code=201)
def create_category(
    form: CategoryForm,
    user: User = Depends(admin_only),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Category:
    return catalog.create_category(form, user)


@router.put("/{category_id}", response_model=Category)
def update_category(
    category_id: str,
    form: CategoryForm,
    user: User = Depends(admin_only),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Category:
    return catalog.update_category(category_id, form, user)


@router.patch("/{category_id}/status", response_model=Category)
def set_category_status(
    category_id: str,
    body: StatusUpdate,
    user: User = Depends(admin_only),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Category:
    return catalog.set_category_active(category_id, body.is_active, user)


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    user: User = Depends(admin_only),
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict[str, str]:
    catalog.delete_category(category_id, user)
    return {"message": "Category deleted successfully."}

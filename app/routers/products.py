# =============================================================================
# app/routers/products.py - Shop Product Endpoints
# =============================================================================
# Anyone may browse products; only admins may create, edit or delete them.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from app.auth import get_requester, require_requester
from app.dependencies import CatalogServiceDep
from core.access import Requester
from core.models.product import ProductCreate, ProductResponse, ProductUpdate

router = APIRouter()


@router.get("", response_model=list[ProductResponse])
async def list_products(
    catalog: CatalogServiceDep,
    requester: Requester = Depends(get_requester),
    featured: Annotated[bool | None, Query(description="Only featured (true) or non-featured (false)")] = None,
):
    """
    List products, newest first.

    Served from the cached catalog, or from static fallback products when
    Supabase is unreachable.
    """
    return [ProductResponse.from_row(row) for row in catalog.list_products(requester, featured=featured)]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: ProductCreate,
    catalog: CatalogServiceDep,
    requester: Requester = Depends(require_requester),
):
    """Create a product (admin)."""
    return ProductResponse.from_row(catalog.create_product(requester, request))


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: Annotated[UUID, Path(description="Product UUID")],
    catalog: CatalogServiceDep,
    requester: Requester = Depends(get_requester),
):
    return ProductResponse.from_row(catalog.get_product(requester, product_id))


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: Annotated[UUID, Path(description="Product UUID")],
    request: ProductUpdate,
    catalog: CatalogServiceDep,
    requester: Requester = Depends(require_requester),
):
    """Update a product (admin). Set remove_image to clear the primary image."""
    return ProductResponse.from_row(catalog.update_product(requester, product_id, request))


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: Annotated[UUID, Path(description="Product UUID")],
    catalog: CatalogServiceDep,
    requester: Requester = Depends(require_requester),
):
    """Delete a product (admin). Existing order lines keep their price."""
    catalog.delete_product(requester, product_id)

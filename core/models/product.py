# =============================================================================
# core/models/product.py - Shop Product Schemas
# =============================================================================

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

MAX_GALLERY_IMAGES = 3
DEFAULT_DELIVERY_ETA = "3-5 days"


class ProductCreate(BaseModel):
    """
    Schema for creating a product (admin).

    Example:
        {
            "name": "Skylab Quad Kit",
            "price": 4999,
            "stock": 25,
            "image_url": "https://.../product-images/products/1700000000000-kit.png",
            "gallery_urls": [],
            "delivery_eta": "3-5 days",
            "featured": true
        }
    """

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None

    # Primary image plus up to three additional images
    image_url: str | None = None
    gallery_urls: list[str] = Field(default_factory=list, max_length=MAX_GALLERY_IMAGES)

    price: float = Field(..., ge=0)
    stock: int = Field(default=0, ge=0)
    delivery_eta: str | None = None
    featured: bool = False

    def to_row(self) -> dict[str, Any]:
        return self.model_dump()


class ProductUpdate(BaseModel):
    """Partial update. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    image_url: str | None = None
    gallery_urls: list[str] | None = Field(default=None, max_length=MAX_GALLERY_IMAGES)
    price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    delivery_eta: str | None = None
    featured: bool | None = None

    # Explicit flag because image_url=None means "unchanged"
    remove_image: bool = False

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_none=True, exclude={"remove_image"})
        if self.remove_image:
            data["image_url"] = None
        return data


class ProductResponse(BaseModel):
    """Product as shown in the shop and the admin dashboard."""

    id: UUID
    name: str
    description: str = ""
    image: str = ""
    gallery: list[str] = Field(default_factory=list)
    price: float
    stock: int = 0
    delivery_eta: str = DEFAULT_DELIVERY_ETA
    sku: str
    featured: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ProductResponse":
        product_id = str(row["id"])
        gallery = row.get("gallery_urls")
        return cls(
            id=product_id,
            name=row["name"],
            description=row.get("description") or "",
            image=row.get("image_url") or "",
            gallery=[g for g in gallery if isinstance(g, str)] if isinstance(gallery, list) else [],
            price=row["price"],
            stock=row.get("stock") or 0,
            delivery_eta=row.get("delivery_eta") or DEFAULT_DELIVERY_ETA,
            sku=f"SKU-{product_id[:8]}",
            featured=bool(row.get("featured")),
            created_at=row.get("created_at"),
        )

# =============================================================================
# core/models/curriculum.py - Curriculum Module Schemas
# =============================================================================
# A curriculum module is one grade/subject-scoped drone activity with an
# ordered list of assets:
#   - video: a link or storage URL
#   - code:  Python source, stored inline as a base64 data URL or as a URL
#   - doc:   a manual in the curriculum storage bucket
#
# Unpublished modules are only visible to admins (see core.access.policies).
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from lib.codec import decode_inline_text, encode_inline_text, is_inline

DEFAULT_CODE_LABEL = "Python code"
DEFAULT_MODULE_NAME = "Drone Module"


class AssetType(str, Enum):
    VIDEO = "video"
    CODE = "code"
    DOC = "doc"


class Asset(BaseModel):
    """
    One asset reference.

    Example:
        {"type": "code", "url": "data:text/plain;base64,cHJpbnQoMSk=", "label": "hover.py"}
    """

    type: AssetType
    url: str = Field(..., description="Location or inline data URL")
    label: str = Field(default="", description="Display label / download name")


def parse_assets(value: Any) -> list[Asset]:
    """Read a stored asset_urls value, skipping anything that is not an asset."""
    if not isinstance(value, list):
        return []
    assets = []
    for item in value:
        try:
            assets.append(Asset.model_validate(item))
        except ValueError:
            continue
    return assets


def code_snippet_from_assets(assets: list[Asset]) -> str | None:
    """Decoded text of the first inline code asset, if any."""
    for asset in assets:
        if asset.type == AssetType.CODE and is_inline(asset.url):
            return decode_inline_text(asset.url) or None
    return None


def embed_code_snippet(assets: list[Asset], snippet: str, label: str | None = None) -> list[Asset]:
    """
    Store `snippet` as the inline url of the first code asset.

    Appends a code asset when there is none.
    """
    inline_url = encode_inline_text(snippet)
    result = list(assets)
    for index, asset in enumerate(result):
        if asset.type == AssetType.CODE:
            result[index] = asset.model_copy(
                update={"url": inline_url, "label": label or asset.label or DEFAULT_CODE_LABEL}
            )
            return result
    result.append(Asset(type=AssetType.CODE, url=inline_url, label=label or DEFAULT_CODE_LABEL))
    return result


class CurriculumModuleCreate(BaseModel):
    """
    Schema for creating a curriculum module (admin).

    `code_snippet` is a convenience: when given, it is embedded into the
    asset list as an inline code asset labelled `code_label`.
    """

    title: str = Field(..., min_length=1, max_length=200)
    grade: str = Field(..., min_length=1, examples=["Grade 9"])
    subject: str = Field(..., min_length=1, examples=["Physics"])
    module: str = Field(default=DEFAULT_MODULE_NAME, min_length=1)
    description: str | None = None
    assets: list[Asset] = Field(default_factory=list)
    price_yearly: float | None = Field(default=None, ge=0)
    published: bool = True

    code_snippet: str | None = Field(
        default=None,
        description="Python source to embed inline"
    )
    code_label: str | None = None

    def to_row(self) -> dict[str, Any]:
        assets = self.assets
        if self.code_snippet:
            assets = embed_code_snippet(assets, self.code_snippet, self.code_label)
        return {
            "title": self.title,
            "grade": self.grade,
            "subject": self.subject,
            "module": self.module,
            "description": self.description,
            "asset_urls": [a.model_dump(mode="json") for a in assets],
            "price_yearly": self.price_yearly,
            "published": self.published,
        }


# Optional columns a partial update may set back to NULL
CLEARABLE_MODULE_FIELDS = ("description", "price_yearly")


class CurriculumModuleUpdate(BaseModel):
    """
    Partial update. Omitted fields are left unchanged; an explicit null
    clears description or price_yearly.
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    grade: str | None = None
    subject: str | None = None
    module: str | None = None
    description: str | None = None
    assets: list[Asset] | None = None
    price_yearly: float | None = Field(default=None, ge=0)
    published: bool | None = None
    code_snippet: str | None = None
    code_label: str | None = None

    def changes(self, current_assets: list[Asset]) -> dict[str, Any]:
        data = self.model_dump(
            exclude_none=True,
            exclude={"assets", "code_snippet", "code_label"},
        )
        # Nullable columns may be cleared by sending an explicit null
        for field in CLEARABLE_MODULE_FIELDS:
            if field in self.model_fields_set and getattr(self, field) is None:
                data[field] = None
        assets = self.assets
        if self.code_snippet is not None:
            assets = embed_code_snippet(
                current_assets if assets is None else assets,
                self.code_snippet,
                self.code_label,
            )
        if assets is not None:
            data["asset_urls"] = [a.model_dump(mode="json") for a in assets]
        return data


class CurriculumModuleResponse(BaseModel):
    """
    Curriculum module as returned to clients.

    `code_snippet` is the decoded inline code asset (None when the code
    lives at an external URL or is missing/unreadable).
    """

    id: UUID
    title: str
    grade: str
    subject: str
    module: str
    description: str = ""
    assets: list[Asset] = Field(default_factory=list)
    price_yearly: float | None = None
    published: bool = True
    code_snippet: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "CurriculumModuleResponse":
        assets = parse_assets(row.get("asset_urls"))
        return cls(
            id=row["id"],
            title=row["title"],
            grade=row["grade"],
            subject=row["subject"],
            module=row["module"],
            description=row.get("description") or "",
            assets=assets,
            price_yearly=row.get("price_yearly"),
            published=row.get("published") is not False,
            code_snippet=code_snippet_from_assets(assets),
            created_at=row.get("created_at"),
        )

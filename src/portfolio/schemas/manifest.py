from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose wire format uses camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Photo(CamelModel):
    id: str
    src: str
    preview_src: str | None = None
    mobile_preview_src: str | None = None
    tablet_preview_src: str | None = None
    desktop_preview_src: str | None = None
    alt: str = ""
    category: str = Field(..., min_length=1)
    folder: str = ""
    filename: str = ""
    uploaded_at: datetime | None = None
    views: int = Field(0, ge=0, description="Synthetic display-only counter, not persisted")


class CategoryCount(CamelModel):
    name: str
    count: int


class ManifestMeta(CamelModel):
    categories: str = ""
    total_categories: int = 0
    total_photos: int = 0
    category_counts: list[CategoryCount] = []


class Manifest(CamelModel):
    generated: datetime
    total_photos: int
    categories: list[str]
    photos: list[Photo]
    meta: ManifestMeta | None = None


class UpdateManifestResponse(CamelModel):
    message: str
    manifest: Manifest
    photos_found: int
    categories: int = Field(..., description="Number of categories in the rebuilt manifest")


class ErrorResponse(BaseModel):
    error: str
    generated: datetime | None = None
    details: str | None = None

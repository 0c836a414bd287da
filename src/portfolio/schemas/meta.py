from datetime import datetime

from portfolio.schemas.manifest import CamelModel, CategoryCount


class SiteMeta(CamelModel):
    title: str
    description: str
    keywords: str
    categories: list[str]
    total_photos: int
    category_counts: list[CategoryCount] = []
    generated: datetime


class UiPolicy(CamelModel):
    """Browser-side protections the front end should apply."""

    disable_context_menu: bool
    disable_text_selection: bool
    block_devtools_shortcuts: bool

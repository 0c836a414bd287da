from portfolio.client.gallery import HeroRotation, Lightbox, category_previews, select_hero_photos
from portfolio.client.provider import PhotoProvider, ProviderState

__all__ = [
    "HeroRotation",
    "Lightbox",
    "PhotoProvider",
    "ProviderState",
    "category_previews",
    "select_hero_photos",
]

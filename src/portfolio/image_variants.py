"""Responsive image URL helpers.

Preview variants are not stored objects: they are the original URL with
resize/quality/format query parameters understood by the image CDN in front of
the bucket.
"""

from dataclasses import dataclass
from urllib.parse import urlencode

DEFAULT_WIDTHS = (640, 1280, 1920, 2560)
DEFAULT_QUALITY = 85
DEFAULT_FORMAT = "webp"


@dataclass(frozen=True)
class ContainerDimensions:
    widths: tuple[int, ...]
    sizes: str
    aspect_ratio: str


CONTAINER_DIMENSIONS = {
    "hero": ContainerDimensions((1280, 1920, 2560, 3200), "100vw", "16/9"),
    "gallery": ContainerDimensions((640, 1280, 1920), "(max-width: 640px) 100vw, 50vw", "3/4"),
    "category": ContainerDimensions((640, 1280, 1920), "(max-width: 640px) 100vw, (max-width: 1024px) 50vw, 33vw", "4/3"),
    "lightbox": ContainerDimensions((1280, 1920, 2560, 3200), "90vw", "auto"),
}

# height / width
_ASPECT_FACTORS = {"16/9": 9 / 16, "3/4": 4 / 3, "4/3": 3 / 4}


def variant_url(base_url: str, width: int, quality: int = DEFAULT_QUALITY, fmt: str = DEFAULT_FORMAT) -> str:
    query = urlencode({"width": width, "quality": quality, "format": fmt})
    return f"{base_url}?{query}"


def generate_image_urls(
    base_url: str,
    widths: tuple[int, ...] | list[int] = DEFAULT_WIDTHS,
    quality: int = DEFAULT_QUALITY,
    fmt: str = DEFAULT_FORMAT,
) -> list[tuple[int, str]]:
    """Return (width, url) pairs for every requested width."""
    return [(width, variant_url(base_url, width, quality, fmt)) for width in widths]


def generate_srcset(urls: list[tuple[int, str]]) -> str:
    return ", ".join(f"{url} {width}w" for width, url in urls)


def generate_sizes(default_sizes: str = "100vw") -> str:
    return f"(max-width: 640px) 100vw, (max-width: 1024px) 100vw, {default_sizes}"


def get_image_dimensions(container_type: str) -> ContainerDimensions:
    """Dimensions for a container type; unknown types fall back to the gallery grid."""
    return CONTAINER_DIMENSIONS.get(container_type, CONTAINER_DIMENSIONS["gallery"])


def generate_picture_props(
    base_url: str,
    container_type: str,
    quality: int = DEFAULT_QUALITY,
    fmt: str = DEFAULT_FORMAT,
) -> dict[str, str | int]:
    """Build srcset/sizes/fallback attributes for a <picture> element.

    The middle resolution is used as fallback URL and nominal width.
    """
    dimensions = get_image_dimensions(container_type)
    urls = generate_image_urls(base_url, dimensions.widths, quality, fmt)
    middle = len(dimensions.widths) // 2
    width = dimensions.widths[middle]
    height = round(width * _ASPECT_FACTORS.get(dimensions.aspect_ratio, 1))
    return {
        "srcset": generate_srcset(urls),
        "sizes": generate_sizes(dimensions.sizes),
        "fallback_url": urls[middle][1],
        "width": width,
        "height": height,
    }

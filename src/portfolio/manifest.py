"""Manifest builder.

Turns a bucket listing into the manifest document consumed by the gallery:
image keys are filtered, grouped by their first path segment and decorated
with display fields. Nothing here performs I/O.
"""

import logging
import random
import re
from collections import Counter
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from urllib.parse import quote

from portfolio.image_variants import variant_url
from portfolio.s3_service import StoredObject
from portfolio.schemas.manifest import CategoryCount, Manifest, ManifestMeta, Photo
from portfolio.settings import ManifestSettings, StorageSettings

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tiff"})
HERO_CATEGORY = "hero"
UNCATEGORIZED = "uncategorized"
DEFAULT_MAX_PHOTOS = 500

# (width, quality) for each preview rendition, all served as webp
PREVIEW_VARIANT = (400, 70)
MOBILE_VARIANT = (640, 85)
TABLET_VARIANT = (1280, 85)
DESKTOP_VARIANT = (1920, 85)

_WORD_START = re.compile(r"(^|\s)(\S)")


def get_basename(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def get_file_extension(filename: str) -> str:
    """Lower-cased extension including the dot, or "" for dotfiles and bare names."""
    last_dot = filename.rfind(".")
    return filename[last_dot:].lower() if last_dot > 0 else ""


def get_filename_without_ext(filename: str) -> str:
    last_dot = filename.rfind(".")
    return filename[:last_dot] if last_dot > 0 else filename


def generate_alt_text(filename: str) -> str:
    """Humanize a filename: "my-cool_Photo.JPG" -> "My Cool Photo"."""
    name = get_filename_without_ext(filename)
    name = name.replace("-", " ").replace("_", " ")
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), name)


def clean_key(key: str, bucket_name: str | None = None) -> str:
    """Strip a leading slash and a "{bucket}/" prefix from an object key."""
    if key.startswith("/"):
        key = key[1:]
    if bucket_name:
        key = key.removeprefix(f"{bucket_name}/")
    return key


def derive_category(key: str) -> str:
    """First path segment of the key, or "uncategorized" for top-level objects."""
    parts = key.split("/")
    if len(parts) > 1 and parts[0]:
        return parts[0]
    return UNCATEGORIZED


def is_image_key(key: str) -> bool:
    return get_file_extension(get_basename(key)) in IMAGE_EXTENSIONS


def is_hero_category(category: str) -> bool:
    return category.lower() == HERO_CATEGORY


def count_categories(photos: Iterable[Photo]) -> list[CategoryCount]:
    """Photo counts per non-hero category, in alphabetical order."""
    counts = Counter(photo.category for photo in photos if not is_hero_category(photo.category))
    return [CategoryCount(name=name, count=counts[name]) for name in sorted(counts)]


class ManifestBuilder:
    """Builds Manifest documents from bucket listings.

    Args:
        bucket_name: Bucket name, stripped from keys that carry it as a prefix
        base_url: Public URL the photos are served from
        max_photos: Maximum number of image keys kept from a listing
        rng: Source of the synthetic ``views`` values
        clock: Returns the current time; used for ``generated``
    """

    def __init__(
        self,
        bucket_name: str,
        base_url: str,
        max_photos: int = DEFAULT_MAX_PHOTOS,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.bucket_name = bucket_name
        self.base_url = base_url.rstrip("/")
        self.max_photos = max_photos
        self._rng = rng or random.Random()
        self._clock = clock or (lambda: datetime.now(UTC))

    @classmethod
    def from_settings(cls, storage: StorageSettings, manifest: ManifestSettings) -> "ManifestBuilder":
        return cls(storage.bucket_name, storage.base_url, max_photos=manifest.max_photos)

    def select_image_keys(self, objects: Iterable[StoredObject | str]) -> list[StoredObject]:
        """Clean keys, keep image files, cap at max_photos (listing order)."""
        selected: list[StoredObject] = []
        for obj in objects:
            if isinstance(obj, str):
                obj = StoredObject(key=obj)
            key = clean_key(obj.key, self.bucket_name)
            if not is_image_key(key):
                continue
            selected.append(StoredObject(key=key, size=obj.size, last_modified=obj.last_modified))
            if len(selected) >= self.max_photos:
                break
        return selected

    def build_photo(self, obj: StoredObject, generated: datetime) -> Photo:
        key = obj.key
        filename = get_basename(key)
        category = derive_category(key)
        src = f"{self.base_url}/{quote(key, safe='/~')}"
        return Photo(
            id=f"{category}-{get_filename_without_ext(filename)}",
            src=src,
            preview_src=variant_url(src, *PREVIEW_VARIANT),
            mobile_preview_src=variant_url(src, *MOBILE_VARIANT),
            tablet_preview_src=variant_url(src, *TABLET_VARIANT),
            desktop_preview_src=variant_url(src, *DESKTOP_VARIANT),
            alt=generate_alt_text(filename),
            category=category,
            folder=category,
            filename=filename,
            uploaded_at=obj.last_modified or generated,
            views=self._rng.randrange(100),
        )

    def build(self, objects: Iterable[StoredObject | str]) -> Manifest:
        generated = self._clock()
        photos = [self.build_photo(obj, generated) for obj in self.select_image_keys(objects)]
        photos.sort(key=lambda p: (p.category, p.filename))

        category_counts = count_categories(photos)
        categories = [item.name for item in category_counts]

        logger.info(f"Generated manifest with {len(photos)} photos and {len(categories)} categories")
        return Manifest(
            generated=generated,
            total_photos=len(photos),
            categories=categories,
            photos=photos,
            meta=ManifestMeta(
                categories=", ".join(categories),
                total_categories=len(categories),
                total_photos=len(photos),
                category_counts=category_counts,
            ),
        )


def build_manifest(objects: Iterable[StoredObject | str], bucket_name: str, base_url: str, **kwargs) -> Manifest:
    """Shortcut for ManifestBuilder(bucket_name, base_url, **kwargs).build(objects)."""
    return ManifestBuilder(bucket_name, base_url, **kwargs).build(objects)


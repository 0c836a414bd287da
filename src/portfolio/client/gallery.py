"""Presentation state for the gallery: lightbox navigation and hero rotation."""

import time
from collections.abc import Callable, Iterable, Sequence

from portfolio.manifest import is_hero_category
from portfolio.schemas.manifest import Photo

HERO_INTERVAL = 30.0
HERO_LIMIT = 3
SWIPE_THRESHOLD = 50


class Lightbox:
    """Full-screen viewer over the photos currently shown in the grid."""

    def __init__(self, photos: Sequence[Photo] = ()):
        self.photos = list(photos)
        self.is_open = False
        self.selected: Photo | None = None

    def set_photos(self, photos: Sequence[Photo]) -> None:
        self.photos = list(photos)

    def open(self, photo: Photo) -> None:
        self.selected = photo
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def navigate(self, direction: int) -> Photo | None:
        """Move by ``direction`` photos, wrapping around at both ends."""
        if self.selected is None or not self.photos:
            return self.selected
        ids = [photo.id for photo in self.photos]
        current = ids.index(self.selected.id) if self.selected.id in ids else -1
        self.selected = self.photos[(current + direction) % len(self.photos)]
        return self.selected

    def handle_key(self, key: str) -> bool:
        """Apply a keyboard shortcut; returns False when the key was ignored."""
        if not self.is_open:
            return False
        if key == "Escape":
            self.close()
        elif key == "ArrowLeft":
            self.navigate(-1)
        elif key == "ArrowRight":
            self.navigate(1)
        else:
            return False
        return True

    def handle_swipe(self, start_x: float, end_x: float, threshold: float = SWIPE_THRESHOLD) -> bool:
        """Swipe left shows the next photo, swipe right the previous one."""
        if not self.is_open:
            return False
        distance = start_x - end_x
        if abs(distance) < threshold:
            return False
        self.navigate(1 if distance > 0 else -1)
        return True


def select_hero_photos(photos: Iterable[Photo], limit: int = HERO_LIMIT) -> list[Photo]:
    """Banner photos: the hero category when it exists, else the first photos."""
    photos = list(photos)
    heroes = [photo for photo in photos if is_hero_category(photo.category)]
    return (heroes or photos)[:limit]


class HeroRotation:
    def __init__(
        self,
        photos: Sequence[Photo],
        interval: float = HERO_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.photos = list(photos)
        self.interval = interval
        self.index = 0
        self._clock = clock
        self._last_advance = clock()

    @property
    def current(self) -> Photo | None:
        return self.photos[self.index] if self.photos else None

    def advance(self) -> Photo | None:
        if self.photos:
            self.index = (self.index + 1) % len(self.photos)
        self._last_advance = self._clock()
        return self.current

    def tick(self) -> Photo | None:
        """Advance once per elapsed interval since the last change."""
        if not self.photos:
            return None
        steps = int((self._clock() - self._last_advance) // self.interval)
        if steps > 0:
            self.index = (self.index + steps) % len(self.photos)
            self._last_advance += steps * self.interval
        return self.current


def category_previews(photos: Iterable[Photo], categories: Iterable[str]) -> list[tuple[str, Photo]]:
    """First photo of each category, in the given category order."""
    first: dict[str, Photo] = {}
    for photo in photos:
        first.setdefault(photo.category, photo)
    return [(category, first[category]) for category in categories if category in first]

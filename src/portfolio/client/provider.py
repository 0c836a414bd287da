"""
Manifest data provider

Client-side holder of the photo manifest: fetches /api/manifest with a bounded
timeout, keeps the result for a TTL window and exposes the derived views the
gallery renders. Failures never propagate to callers; they are turned into a
user-facing message stored on ``error``.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from enum import StrEnum

import httpx

from portfolio.manifest import is_hero_category
from portfolio.schemas.manifest import Manifest, Photo

logger = logging.getLogger(__name__)

MANIFEST_PATH = "/api/manifest"
DEFAULT_TTL = 5 * 60
DEFAULT_TIMEOUT = 8.0

TIMEOUT_MESSAGE = "Request timed out. Please check your connection and try again."
NETWORK_MESSAGE = "Network error. Please check your connection and try again."
STATUS_MESSAGE = "Failed to load photos (server responded {status}). Please try refreshing the page."
GENERIC_MESSAGE = "Failed to load photos. Please try refreshing the page."
EMPTY_MESSAGE = "No photos found. Please upload photos to the bucket."


class ProviderState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


def _with_variants(photo: Photo) -> Photo:
    """Fill missing preview renditions from previewSrc, then src."""
    fallback = photo.preview_src or photo.src
    return photo.model_copy(
        update={
            "mobile_preview_src": photo.mobile_preview_src or fallback,
            "tablet_preview_src": photo.tablet_preview_src or fallback,
            "desktop_preview_src": photo.desktop_preview_src or fallback,
        }
    )


def _upload_order(photo: Photo) -> float:
    return photo.uploaded_at.timestamp() if photo.uploaded_at else 0.0


class PhotoProvider:
    """Fetches and caches the photo manifest.

    Args:
        base_url: Origin of the portfolio API, ignored when ``client`` is given
        client: httpx.AsyncClient to use; the provider closes only clients it created
        ttl: Seconds a successful load is served from memory
        timeout: Seconds before the manifest request is abandoned
        clock: Monotonic time source
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        client: httpx.AsyncClient | None = None,
        ttl: float = DEFAULT_TTL,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url)
        self._owns_client = client is None
        self.ttl = ttl
        self.timeout = timeout
        self._clock = clock

        self.state = ProviderState.IDLE
        self.photos: list[Photo] = []
        self.error: str | None = None
        self.last_fetch: float | None = None
        self._inflight: asyncio.Task | None = None

    async def __aenter__(self) -> "PhotoProvider":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    @property
    def loading(self) -> bool:
        return self.state is ProviderState.LOADING

    def is_fresh(self) -> bool:
        """True while photos from a successful load are younger than the TTL."""
        if self.last_fetch is None or not self.photos:
            return False
        return self._clock() - self.last_fetch < self.ttl

    async def load(self, force_refresh: bool = False) -> None:
        """Load the manifest unless a fresh copy is already held.

        Concurrent calls share the request that is already in flight.
        """
        if self._inflight is None:
            if not force_refresh and self.is_fresh():
                logger.debug("Serving manifest from memory")
                return
            self._inflight = asyncio.create_task(self._fetch(force_refresh))
            self._inflight.add_done_callback(self._clear_inflight)

        # a cancelled caller must not cancel the request other callers share
        await asyncio.shield(self._inflight)

    def _clear_inflight(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None

    async def refresh(self) -> None:
        await self.load(force_refresh=True)

    async def _fetch(self, force_refresh: bool) -> None:
        self.state = ProviderState.LOADING
        self.error = None

        params = {"refresh": "true"} if force_refresh else None
        headers = {
            "Accept": "application/json",
            "Cache-Control": "no-cache" if force_refresh else f"max-age={int(self.ttl)}",
        }
        try:
            response = await self._client.get(MANIFEST_PATH, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            manifest = Manifest.model_validate(response.json())
        except httpx.TimeoutException as e:
            self._fail(TIMEOUT_MESSAGE, e)
            return
        except httpx.HTTPStatusError as e:
            self._fail(STATUS_MESSAGE.format(status=e.response.status_code), e)
            return
        except httpx.RequestError as e:
            self._fail(NETWORK_MESSAGE, e)
            return
        except ValueError as e:
            # undecodable JSON or a body that is not a manifest (ValidationError)
            self._fail(GENERIC_MESSAGE, e)
            return

        if not manifest.photos:
            self.photos = []
            self.last_fetch = None
            self.error = EMPTY_MESSAGE
            self.state = ProviderState.ERROR
            logger.warning("Manifest contains no photos")
            return

        self.photos = sorted((_with_variants(photo) for photo in manifest.photos), key=_upload_order)
        self.last_fetch = self._clock()
        self.state = ProviderState.READY
        logger.info(f"Loaded {len(self.photos)} photos")

    def _fail(self, message: str, exc: Exception) -> None:
        logger.error(f"Error loading photos: {exc!r}")
        self.photos = []
        self.last_fetch = None
        self.error = message
        self.state = ProviderState.ERROR

    @property
    def categories(self) -> list[str]:
        return sorted({photo.category for photo in self.photos if not is_hero_category(photo.category)})

    def get_all_photos(self) -> list[Photo]:
        """Every photo except hero banners."""
        return [photo for photo in self.photos if not is_hero_category(photo.category)]

    def get_photos_by_category(self, category: str) -> list[Photo]:
        return [photo for photo in self.photos if category in (photo.category, photo.folder)]

    def get_hero_photos(self) -> list[Photo]:
        return [photo for photo in self.photos if is_hero_category(photo.category)]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

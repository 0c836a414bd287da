import logging

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from portfolio.api.responses import CONFIG_MISSING_MESSAGE, cache_control, client_ip, error_response, json_headers
from portfolio.dependencies import get_manifest_settings, get_portfolio_service
from portfolio.logger import events
from portfolio.schemas.manifest import ErrorResponse, Manifest, UpdateManifestResponse
from portfolio.service import PortfolioService
from portfolio.settings import ManifestSettings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["manifest"])


@router.get(
    "/manifest",
    response_model=Manifest,
    responses={500: {"model": ErrorResponse}},
)
async def get_manifest(
    request: Request,
    refresh: bool = Query(False, description="Bypass browser and edge caches"),
    service: PortfolioService = Depends(get_portfolio_service),
    settings: ManifestSettings = Depends(get_manifest_settings),
):
    """Describe every photo currently in the bucket."""
    events.log_event(
        "manifest_request",
        client_ip=client_ip(request),
        user_agent=request.headers.get("user-agent", "unknown")[:50],
        refresh=refresh,
    )

    try:
        manifest = await service.generate_manifest()
        content = manifest.model_dump(mode="json", by_alias=True)
    except Exception as e:
        logger.error(f"Error generating manifest: {e}")
        return error_response("Failed to generate manifest")

    events.log_event("manifest_generated", total_photos=manifest.total_photos, total_categories=len(manifest.categories))
    return JSONResponse(content=content, headers=json_headers(cache_control(settings.cache_max_age, refresh)))


@router.post(
    "/update-manifest",
    response_model=UpdateManifestResponse,
    responses={500: {"model": ErrorResponse}},
)
async def update_manifest(request: Request):
    """Rebuild the manifest from a fresh listing and return it."""
    service: PortfolioService | None = getattr(request.app.state, "portfolio_service", None)
    if service is None:
        logger.error(f"Manifest update rejected: {getattr(request.app.state, 'config_error', None)}")
        return error_response(CONFIG_MISSING_MESSAGE)

    try:
        manifest = await service.generate_manifest()
    except Exception as e:
        logger.error(f"Error updating manifest: {e}")
        events.log_event("manifest_update_failed", level=logging.ERROR, error=repr(e))
        return error_response("Failed to update manifest", details=str(e))

    response = UpdateManifestResponse(
        message="Manifest updated successfully",
        manifest=manifest,
        photos_found=manifest.total_photos,
        categories=len(manifest.categories),
    )
    events.log_event("manifest_updated", photos_found=response.photos_found, categories=response.categories)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=response.model_dump(mode="json", by_alias=True),
        headers=json_headers(cache_control(0, refresh=True)),
    )

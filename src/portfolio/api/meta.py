import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from portfolio.api.responses import cache_control, error_response, json_headers
from portfolio.dependencies import get_manifest_settings, get_portfolio_service, get_site_settings
from portfolio.meta import build_meta, build_ui_policy
from portfolio.schemas.manifest import ErrorResponse
from portfolio.schemas.meta import SiteMeta, UiPolicy
from portfolio.service import PortfolioService
from portfolio.settings import ManifestSettings, SiteSettings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/meta", response_model=SiteMeta, responses={500: {"model": ErrorResponse}})
async def get_meta(
    service: PortfolioService = Depends(get_portfolio_service),
    settings: ManifestSettings = Depends(get_manifest_settings),
    site: SiteSettings = Depends(get_site_settings),
):
    """SEO title, description and keywords for the current library"""
    try:
        manifest = await service.generate_manifest()
        meta = build_meta(manifest, site)
        content = meta.model_dump(mode="json", by_alias=True)
    except Exception as e:
        logger.error(f"Error generating meta data: {e}")
        return error_response("Failed to generate meta data")

    return JSONResponse(content=content, headers=json_headers(cache_control(settings.cache_max_age)))


@router.get("/ui-policy", response_model=UiPolicy, response_model_by_alias=True)
def get_ui_policy(site: SiteSettings = Depends(get_site_settings)) -> UiPolicy:
    return build_ui_policy(site)

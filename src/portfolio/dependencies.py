"""
Dependency injection for the storage client and services

The object store client and the services built on it are created once during
application startup (see portfolio.main.lifespan) and stored on app.state.
These helpers hand them to route handlers through FastAPI's Depends().
"""

from fastapi import Request

from portfolio.exceptions import ConfigurationError
from portfolio.s3_service import AsyncS3Client
from portfolio.service import PortfolioService
from portfolio.settings import ManifestSettings, SiteSettings


def _configuration_error(request: Request) -> ConfigurationError:
    reason = getattr(request.app.state, "config_error", None)
    return ConfigurationError(reason or "Storage client not initialized")


def get_s3_client(request: Request) -> AsyncS3Client:
    """Storage client for the current app.

    Raises:
        ConfigurationError: when startup could not build a client
    """
    client = getattr(request.app.state, "s3_client", None)
    if client is None:
        raise _configuration_error(request)
    return client


def get_portfolio_service(request: Request) -> PortfolioService:
    service = getattr(request.app.state, "portfolio_service", None)
    if service is None:
        raise _configuration_error(request)
    return service


def get_manifest_settings(request: Request) -> ManifestSettings:
    return request.app.state.manifest_settings


def get_site_settings(request: Request) -> SiteSettings:
    return request.app.state.site_settings

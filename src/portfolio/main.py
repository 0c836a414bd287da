import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio.api.manifest import router as manifest_router
from portfolio.api.meta import router as meta_router
from portfolio.api.photos import router as photos_router
from portfolio.api.responses import CONFIG_MISSING_MESSAGE, error_response
from portfolio.exceptions import ConfigurationError, ObjectNotFoundError, StorageError
from portfolio.manifest import ManifestBuilder
from portfolio.metrics import setup_metrics
from portfolio.s3_service import AsyncS3Client
from portfolio.service import PortfolioService
from portfolio.settings import ManifestSettings, SiteSettings, get_manifest_settings, get_site_settings, load_storage_settings

from .logging_config import configure_logging

# uvicorn imports this module when starting the app, so logging is configured
# before its own loggers start emitting
configure_logging()

logger = logging.getLogger(__name__)


def _init_storage(app: FastAPI, s3_client: AsyncS3Client | None) -> None:
    """Resolve storage settings once and attach the client and services to app.state."""
    app.state.config_error = None
    if s3_client is None:
        try:
            s3_client = AsyncS3Client(load_storage_settings())
        except ConfigurationError as e:
            # store-backed endpoints answer 500 until the environment is fixed
            logger.critical(str(e))
            app.state.config_error = str(e)
            app.state.s3_client = None
            app.state.portfolio_service = None
            return

    builder = ManifestBuilder.from_settings(s3_client.settings, app.state.manifest_settings)
    app.state.s3_client = s3_client
    app.state.portfolio_service = PortfolioService(s3_client, builder)
    logger.info("S3 client initialized successfully")


def create_app(
    s3_client: AsyncS3Client | None = None,
    manifest_settings: ManifestSettings | None = None,
    site_settings: SiteSettings | None = None,
) -> FastAPI:
    """Build the portfolio API.

    Args:
        s3_client: Pre-built storage client; when omitted one is created from
            the R2_* environment at startup
        manifest_settings: Overrides MANIFEST_* environment settings
        site_settings: Overrides SITE_* environment settings
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up application...")
        _init_storage(app, s3_client)

        yield

        logger.info("Shutting down application...")
        client = app.state.s3_client
        if client is not None:
            try:
                await client.close()
                logger.info("S3 client closed successfully")
            except Exception as e:
                logger.error(f"Error during S3 client shutdown: {e}")

    site = site_settings or get_site_settings()
    app = FastAPI(title="Photography Portfolio", redoc_url=None, lifespan=lifespan)
    app.state.manifest_settings = manifest_settings or get_manifest_settings()
    app.state.site_settings = site
    app.state.s3_client = None
    app.state.portfolio_service = None
    app.state.config_error = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=site.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error(f"Configuration error on {request.url.path}: {exc}")
        return error_response(CONFIG_MISSING_MESSAGE)

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
        return error_response("Not found", status_code=404)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(f"Storage error on {request.url.path}: {exc}")
        return error_response("Object store unavailable")

    app.include_router(manifest_router)
    app.include_router(meta_router)
    app.include_router(photos_router)

    setup_metrics(app)

    @app.get("/", include_in_schema=False)
    def read_root():
        return {"message": "Photography portfolio API"}

    return app


app = create_app()

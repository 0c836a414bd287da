import logging

from portfolio.manifest import ManifestBuilder
from portfolio.s3_service import AsyncS3Client
from portfolio.schemas.manifest import Manifest

logger = logging.getLogger(__name__)


class PortfolioService:
    """Lists the bucket and turns the listing into a manifest.

    Each call performs exactly one listing round-trip; nothing is cached here.
    """

    def __init__(self, s3_client: AsyncS3Client, builder: ManifestBuilder):
        self.s3_client = s3_client
        self.builder = builder

    async def generate_manifest(self) -> Manifest:
        objects = await self.s3_client.list_objects()
        if not objects:
            logger.warning(f"No objects found in bucket {self.s3_client.bucket}")
        return self.builder.build(objects)

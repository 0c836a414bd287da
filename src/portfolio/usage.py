"""Bucket storage usage compared against the R2 free-tier allowance."""

import logging
from dataclasses import dataclass

from portfolio.s3_service import AsyncS3Client

logger = logging.getLogger(__name__)

FREE_TIER_STORAGE_BYTES = 10 * 1024 * 1024 * 1024
ALERT_RATIO = 0.8


@dataclass(frozen=True)
class UsageReport:
    total_size: int
    total_objects: int
    storage_limit: int = FREE_TIER_STORAGE_BYTES
    alert_ratio: float = ALERT_RATIO

    @property
    def storage_ratio(self) -> float:
        return self.total_size / self.storage_limit if self.storage_limit else 0.0

    @property
    def over_threshold(self) -> bool:
        return self.total_size > self.storage_limit * self.alert_ratio

    def summary(self) -> str:
        return f"Storage: {self.total_size / 1024 / 1024:.2f} MB, objects: {self.total_objects}, storage used: {self.storage_ratio * 100:.2f}%"


async def collect_usage(
    s3_client: AsyncS3Client,
    storage_limit: int = FREE_TIER_STORAGE_BYTES,
    alert_ratio: float = ALERT_RATIO,
) -> UsageReport:
    """Walk the whole bucket and total object sizes.

    Raises:
        StorageError: if the bucket cannot be reached or listed
    """
    await s3_client.head_bucket()
    total_size = 0
    total_objects = 0
    async for obj in s3_client.iter_all_objects():
        total_size += obj.size
        total_objects += 1

    report = UsageReport(total_size, total_objects, storage_limit, alert_ratio)
    if report.over_threshold:
        logger.warning(f"Bucket {s3_client.bucket} is above {alert_ratio:.0%} of its storage allowance: {report.summary()}")
    return report

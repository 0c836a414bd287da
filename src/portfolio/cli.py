"""
Command line interface for offline manifest generation and bucket checks.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from portfolio.exceptions import PortfolioError
from portfolio.logging_config import configure_logging
from portfolio.manifest import ManifestBuilder
from portfolio.s3_service import AsyncS3Client
from portfolio.schemas.manifest import Manifest
from portfolio.service import PortfolioService
from portfolio.settings import get_manifest_settings, load_storage_settings
from portfolio.usage import ALERT_RATIO, FREE_TIER_STORAGE_BYTES, collect_usage

logger = logging.getLogger("portfolio.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="portfolio", description="Photography portfolio maintenance tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate-manifest", help="Write the photo manifest to a JSON file")
    generate.add_argument("-o", "--output", type=Path, default=Path("public/photos/manifest.json"), help="Destination file")

    usage = subparsers.add_parser("usage", help="Report bucket storage usage")
    usage.add_argument("--storage-limit", type=int, default=FREE_TIER_STORAGE_BYTES, help="Storage allowance in bytes")
    usage.add_argument("--alert-ratio", type=float, default=ALERT_RATIO, help="Fraction of the allowance that triggers an alert")
    return parser


def write_manifest(manifest: Manifest, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(manifest.model_dump_json(by_alias=True, indent=2) + "\n", encoding="utf-8")


async def generate_manifest(s3_client: AsyncS3Client, output: Path) -> Manifest:
    builder = ManifestBuilder.from_settings(s3_client.settings, get_manifest_settings())
    manifest = await PortfolioService(s3_client, builder).generate_manifest()
    write_manifest(manifest, output)
    logger.info(f"Manifest saved to {output}")
    logger.info(f"Total photos: {manifest.total_photos}")
    logger.info(f"Categories: {', '.join(manifest.categories) or '(none)'}")
    return manifest


async def run(args: argparse.Namespace, s3_client: AsyncS3Client | None = None) -> int:
    client = s3_client or AsyncS3Client(load_storage_settings())
    try:
        if args.command == "generate-manifest":
            manifest = await generate_manifest(client, args.output)
            if manifest.total_photos == 0:
                logger.warning("No images found in the bucket")
            return 0

        report = await collect_usage(client, args.storage_limit, args.alert_ratio)
        logger.info(report.summary())
        return 1 if report.over_threshold else 0
    finally:
        await client.close()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level="DEBUG" if args.verbose else None)
    try:
        return asyncio.run(run(args))
    except PortfolioError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())

# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Command line entry point.

Usage:
    s3-bucket-cleaner --bucket my-bucket --region eu-west-1 --max-age 30d --dry-run

Environment variables:
    BUCKET_NAME: Default for --bucket
    BUCKET_REGION: Default for --region (AWS_REGION is used as a fallback)
    CLEANER_MAX_AGE: Default for --max-age
    CLEANER_DRY_RUN: Default for --dry-run
    CLEANER_PAGE_SIZE: Default for --page-size
    AWS_ENDPOINT_URL: Default for --endpoint-url

Exit codes: 0 on success, 1 when listing or deleting failed, 2 when the
configuration or credentials are unusable.
"""

import asyncio
from datetime import timedelta

import click
import structlog

from s3cleaner import __version__
from s3cleaner.clock import RealClock
from s3cleaner.config import CleanerConfig, MAX_PAGE_SIZE
from s3cleaner.core import APP_NAME, CleanupResult, run_cleanup
from s3cleaner.env import create_config_from_env, format_duration, parse_duration
from s3cleaner.exceptions import (
    ConfigurationError,
    CredentialError,
    DeleteError,
    ListError,
)
from s3cleaner.log import configure_logging
from s3cleaner.storage import S3Gateway, create_session, open_s3_client, verify_credentials

EXIT_OK = 0
EXIT_PIPELINE_ERROR = 1
EXIT_CONFIG_ERROR = 2


class DurationType(click.ParamType):
    """Click parameter accepting durations such as 90d, 36h or 1h30m."""

    name = "duration"

    def convert(self, value, param, ctx):
        if isinstance(value, timedelta):
            return value
        try:
            return parse_duration(value)
        except ConfigurationError as e:
            self.fail(e.message, param, ctx)


async def _run(config: CleanerConfig) -> CleanupResult:
    session = create_session()
    await verify_credentials(session)

    async with open_s3_client(session, config) as s3_client:
        gateway = S3Gateway(s3_client, page_size=config.page_size)
        return await run_cleanup(config, gateway, RealClock())


@click.command(name="s3-bucket-cleaner")
@click.version_option(version=__version__)
@click.option("--bucket", envvar="BUCKET_NAME", help="Bucket name, defaults to $BUCKET_NAME")
@click.option("--region", envvar="BUCKET_REGION", help="Bucket region, defaults to $BUCKET_REGION")
@click.option(
    "--max-age",
    type=DurationType(),
    default="90d",
    show_default=True,
    envvar="CLEANER_MAX_AGE",
    help="Delete objects older than the max age",
)
@click.option("--dry-run", is_flag=True, envvar="CLEANER_DRY_RUN", help="Do not actually delete any object")
@click.option(
    "--page-size",
    type=click.IntRange(1, MAX_PAGE_SIZE),
    default=MAX_PAGE_SIZE,
    show_default=True,
    envvar="CLEANER_PAGE_SIZE",
    help="Objects requested per listing page",
)
@click.option("--endpoint-url", envvar="AWS_ENDPOINT_URL", help="Endpoint of an S3-compatible service")
@click.option(
    "--log-format",
    type=click.Choice(["auto", "json", "console"]),
    default="auto",
    show_default=True,
    help="auto uses console output on a terminal and JSON otherwise",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.pass_context
def main(
    ctx: click.Context,
    bucket: str | None,
    region: str | None,
    max_age: timedelta,
    dry_run: bool,
    page_size: int,
    endpoint_url: str | None,
    log_format: str,
    log_level: str,
) -> None:
    """Delete objects older than a maximum age from an S3 bucket."""
    json_logs = {"auto": None, "json": True, "console": False}[log_format]
    configure_logging(json=json_logs, level=log_level)

    logger = structlog.get_logger().bind(name=APP_NAME)
    logger.info("started")

    try:
        config = create_config_from_env(
            bucket=bucket,
            region=region,
            max_age=max_age,
            dry_run=dry_run,
            page_size=page_size,
            endpoint_url=endpoint_url,
        )
    except ConfigurationError as e:
        logger.critical("invalid_configuration", error=str(e))
        ctx.exit(EXIT_CONFIG_ERROR)

    logger.info(
        "configuration_loaded",
        bucket=config.bucket,
        region=config.region,
        max_age=format_duration(config.max_age),
        dry_run=config.dry_run,
    )

    exit_code = EXIT_OK
    try:
        result = asyncio.run(_run(config))
    except CredentialError as e:
        logger.critical("unable_to_create_aws_session", error=str(e))
        ctx.exit(EXIT_CONFIG_ERROR)
    except (ListError, DeleteError) as e:
        logger.error("unable_to_clean_up_objects", error=str(e))
        exit_code = EXIT_PIPELINE_ERROR
    else:
        logger.info(
            "summary",
            scanned=result.total_scanned,
            candidates=result.candidates_found,
            deleted=result.deleted_count,
        )

    logger.info("finished")
    ctx.exit(exit_code)

# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
S3 Bucket Cleaner Core - The retention pipeline.

Lists every object in a bucket page by page, asks the clock how old each
one is, collects the keys older than the threshold and deletes them in a
single batch (or only reports them in dry-run mode).
"""

from contextlib import aclosing
from dataclasses import dataclass, field
from datetime import datetime, timedelta, UTC
from typing import Dict, List

import structlog
from ulid import ULID

from s3cleaner.clock import Clock
from s3cleaner.config import DEFAULT_MAX_AGE, CleanerConfig
from s3cleaner.errors import explain_missing_bucket
from s3cleaner.exceptions import ConfigurationError
from s3cleaner.storage import StorageGateway

APP_NAME = "aws-s3-bucket-cleaner"


@dataclass
class CleanupResult:
    """Result of a cleanup run."""

    operation_id: str  # ULID
    bucket: str
    dry_run: bool
    total_scanned: int
    candidates_found: int
    deleted_count: int
    duration_seconds: float
    candidate_keys: List[str] = field(default_factory=list)
    deleted_keys: List[str] = field(default_factory=list)
    failed_keys: Dict[str, str] = field(default_factory=dict)


async def clean_up_objects(
    gateway: StorageGateway,
    clock: Clock,
    bucket: str,
    max_age: timedelta = DEFAULT_MAX_AGE,
    dry_run: bool = False,
) -> CleanupResult:
    """
    Delete every object in the bucket older than max_age.

    An object is a candidate when clock.since(last_modified) > max_age, so
    an object exactly max_age old is kept. Candidates are deleted with one
    gateway.delete_objects() call once the listing is exhausted.

    Args:
        gateway: Storage gateway used to list and delete objects
        clock: Time source used to compute object ages
        bucket: Bucket to clean
        max_age: Retention threshold (default: 90 days)
        dry_run: If True, only report candidates

    Returns:
        CleanupResult; deleted_count is what the gateway reported as deleted

    Raises:
        ConfigurationError: empty bucket or negative max_age
        ListError: the listing failed, nothing was deleted
        DeleteError: the delete request itself failed
    """
    if not bucket:
        raise ConfigurationError(explain_missing_bucket())
    if max_age < timedelta(0):
        raise ConfigurationError(f"max_age must be >= 0, got {max_age}")

    operation_id = str(ULID())
    start_time = datetime.now(UTC)
    logger = structlog.get_logger().bind(
        name=APP_NAME, operation_id=operation_id, bucket=bucket
    )

    logger.info("cleanup_started", max_age=str(max_age), dry_run=dry_run)

    total_scanned = 0
    candidates: List[str] = []

    def _result(deleted_keys: List[str], failed_keys: Dict[str, str]) -> CleanupResult:
        return CleanupResult(
            operation_id=operation_id,
            bucket=bucket,
            dry_run=dry_run,
            total_scanned=total_scanned,
            candidates_found=len(candidates),
            deleted_count=len(deleted_keys),
            duration_seconds=(datetime.now(UTC) - start_time).total_seconds(),
            candidate_keys=candidates,
            deleted_keys=deleted_keys,
            failed_keys=failed_keys,
        )

    try:
        # Step 1: Walk the listing and filter by age
        async with aclosing(gateway.list_pages(bucket)) as pages:
            async for page in pages:
                total_scanned += len(page)
                logger.debug("objects_listed", count=len(page), total=total_scanned)

                for record in page:
                    age = clock.since(record.last_modified)
                    if age > max_age:
                        logger.info(
                            "object_marked_for_deletion",
                            s3_key=record.key,
                            last_modified=record.last_modified.isoformat(),
                            age=str(age),
                        )
                        candidates.append(record.key)

        if not candidates:
            logger.info("no_objects_to_delete", total_scanned=total_scanned)
            return _result([], {})

        # Step 2: Dry run stops before any side effect
        if dry_run:
            logger.info(
                "dry_run_enabled",
                candidates=len(candidates),
                message="no object will be deleted",
            )
            return _result([], {})

        # Step 3: One batch delete for all candidates
        logger.info("deleting_objects", candidates=len(candidates))
        report = await gateway.delete_objects(bucket, candidates)

        result = _result(list(report.deleted), dict(report.failed))
        logger.info(
            "objects_deleted",
            deleted=result.deleted_count,
            failed=len(result.failed_keys),
            duration=result.duration_seconds,
        )
        return result

    except Exception as e:
        logger.error("cleanup_failed", error=str(e))
        raise


async def run_cleanup(config: CleanerConfig, gateway: StorageGateway, clock: Clock) -> CleanupResult:
    """Run the pipeline with the values of a CleanerConfig."""
    return await clean_up_objects(
        gateway,
        clock,
        config.bucket,
        max_age=config.max_age,
        dry_run=config.dry_run,
    )

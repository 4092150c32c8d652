# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
S3 Bucket Cleaner Storage - Storage gateway contract and the S3 adapter.

The pipeline only needs two things from storage: a paginated listing of
every object in a bucket and a batch delete that reports per-key results.
StorageGateway describes that contract; S3Gateway implements it on top of
an aiobotocore S3 client.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Protocol, Sequence

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from s3cleaner.config import CleanerConfig, MAX_PAGE_SIZE
from s3cleaner.errors import explain_missing_credentials
from s3cleaner.exceptions import CredentialError, DeleteError, ListError

logger = structlog.get_logger()

# DeleteObjects accepts at most 1000 keys per request
DELETE_BATCH_LIMIT = 1000


@dataclass(frozen=True)
class ObjectRecord:
    """One object as seen by the listing."""

    key: str
    last_modified: datetime


@dataclass
class DeleteReport:
    """Per-key outcome of a batch delete."""

    deleted: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)  # key -> reason

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)


class StorageGateway(Protocol):
    """Storage operations the retention pipeline depends on."""

    def list_pages(self, bucket: str) -> AsyncIterator[List[ObjectRecord]]:
        """
        Yield the bucket's objects one page at a time.

        The sequence is lazy, finite and forward-only; each page must be
        consumed before the next one is fetched.
        """
        ...

    async def delete_objects(self, bucket: str, keys: Sequence[str]) -> DeleteReport:
        """
        Delete exactly the given keys and report which ones were deleted.

        A key that no longer exists counts as deleted.
        """
        ...


class S3Gateway:
    """StorageGateway backed by an aiobotocore S3 client."""

    def __init__(self, s3_client: Any, page_size: int = MAX_PAGE_SIZE):
        self.s3_client = s3_client
        self.page_size = page_size

    async def list_pages(self, bucket: str) -> AsyncIterator[List[ObjectRecord]]:
        paginator = self.s3_client.get_paginator("list_objects_v2")

        try:
            async for page in paginator.paginate(Bucket=bucket, MaxKeys=self.page_size):
                yield [
                    ObjectRecord(key=obj["Key"], last_modified=obj["LastModified"])
                    for obj in page.get("Contents", [])
                ]
        except (ClientError, BotoCoreError) as e:
            raise ListError(
                "failed to list objects",
                details={"bucket": bucket, "error": str(e)},
            ) from e

    async def delete_objects(self, bucket: str, keys: Sequence[str]) -> DeleteReport:
        report = DeleteReport()

        for start in range(0, len(keys), DELETE_BATCH_LIMIT):
            chunk = keys[start : start + DELETE_BATCH_LIMIT]
            try:
                response = await self.s3_client.delete_objects(
                    Bucket=bucket,
                    Delete={
                        "Objects": [{"Key": key} for key in chunk],
                        "Quiet": False,
                    },
                )
            except (ClientError, BotoCoreError) as e:
                raise DeleteError(
                    "failed to delete objects",
                    details={
                        "bucket": bucket,
                        "error": str(e),
                        "deleted": list(report.deleted),
                    },
                ) from e

            report.deleted.extend(obj["Key"] for obj in response.get("Deleted", []))

            for error in response.get("Errors", []):
                reason = f"{error.get('Code')}: {error.get('Message')}"
                report.failed[error["Key"]] = reason
                logger.warning(
                    "object_delete_failed",
                    bucket=bucket,
                    s3_key=error["Key"],
                    reason=reason,
                )

        return report


def create_session() -> Any:
    """Create an aiobotocore session."""
    from aiobotocore.session import get_session

    return get_session()


async def verify_credentials(session: Any) -> None:
    """
    Make sure the session can resolve AWS credentials.

    Raises:
        CredentialError: no credentials found, or loading them failed
    """
    try:
        credentials = await session.get_credentials()
        if credentials is not None:
            # Refreshable providers only load on first use
            await credentials.get_frozen_credentials()
    except BotoCoreError as e:
        raise CredentialError(explain_missing_credentials(), details={"error": str(e)}) from e

    if credentials is None:
        raise CredentialError(explain_missing_credentials())


@asynccontextmanager
async def open_s3_client(session: Any, config: CleanerConfig) -> AsyncIterator[Any]:
    """Open an S3 client for the configured region and endpoint."""
    from aiobotocore.config import AioConfig

    client_kwargs: Dict[str, Any] = {"region_name": config.region}
    if config.endpoint_url:
        # S3-compatible services rarely support virtual-hosted buckets
        client_kwargs["endpoint_url"] = config.endpoint_url
        client_kwargs["config"] = AioConfig(s3={"addressing_style": "path"})

    async with session.create_client("s3", **client_kwargs) as s3_client:
        yield s3_client

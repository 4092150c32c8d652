# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Test fixtures for s3cleaner tests.

Provides a fixed clock, an in-memory storage gateway, a moto S3 server and
helpers to seed buckets.
"""

import asyncio
import uuid
from datetime import datetime, timedelta, UTC
from typing import AsyncIterator, Iterable, List, Sequence

import pytest
import pytest_asyncio
import structlog

from s3cleaner.clock import FixedClock
from s3cleaner.exceptions import DeleteError, ListError
from s3cleaner.storage import DeleteReport, ObjectRecord

# "Now" for every test that uses the fixed clock
REFERENCE_NOW = datetime(2022, 1, 12, 0, 0, 0, tzinfo=UTC)

CLEANER_ENV_VARS = (
    "BUCKET_NAME",
    "BUCKET_REGION",
    "AWS_REGION",
    "CLEANER_MAX_AGE",
    "CLEANER_DRY_RUN",
    "CLEANER_PAGE_SIZE",
    "AWS_ENDPOINT_URL",
)


def aged(key: str, age: timedelta) -> ObjectRecord:
    """Build an ObjectRecord that is `age` old at REFERENCE_NOW."""
    return ObjectRecord(key=key, last_modified=REFERENCE_NOW - age)


class InMemoryGateway:
    """
    StorageGateway double serving canned pages from memory.

    Deleted keys are removed from the pages, so a second run sees the
    bucket as it is after the first one. Keys that are not stored are
    reported as deleted, like S3 does.
    """

    def __init__(
        self,
        pages: Iterable[Sequence[ObjectRecord]] = (),
        fail_after_pages: int | None = None,
        fail_on_delete: bool = False,
        undeletable: Iterable[str] = (),
    ):
        self.pages: List[List[ObjectRecord]] = [list(page) for page in pages]
        self.fail_after_pages = fail_after_pages
        self.fail_on_delete = fail_on_delete
        self.undeletable = set(undeletable)
        self.list_calls: List[str] = []
        self.delete_calls: List[List[str]] = []

    async def list_pages(self, bucket: str) -> AsyncIterator[List[ObjectRecord]]:
        self.list_calls.append(bucket)
        for index, page in enumerate(self.pages):
            if self.fail_after_pages is not None and index >= self.fail_after_pages:
                raise ListError("failed to list objects", details={"bucket": bucket})
            yield list(page)

    async def delete_objects(self, bucket: str, keys: Sequence[str]) -> DeleteReport:
        self.delete_calls.append(list(keys))
        if self.fail_on_delete:
            raise DeleteError("failed to delete objects", details={"bucket": bucket})

        report = DeleteReport()
        for key in keys:
            if key in self.undeletable:
                report.failed[key] = "AccessDenied: Access Denied"
            else:
                report.deleted.append(key)

        gone = set(report.deleted)
        self.pages = [[r for r in page if r.key not in gone] for page in self.pages]
        return report

    @property
    def keys(self) -> List[str]:
        return [record.key for page in self.pages for record in page]


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() calls made by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Clock pinned to REFERENCE_NOW."""
    return FixedClock(REFERENCE_NOW)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every environment variable the cleaner reads."""
    for name in CLEANER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def aws_credentials(clean_env: pytest.MonkeyPatch) -> None:
    """Fake credentials for moto."""
    clean_env.setenv("AWS_ACCESS_KEY_ID", "testing")
    clean_env.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    clean_env.setenv("AWS_SECURITY_TOKEN", "testing")
    clean_env.setenv("AWS_SESSION_TOKEN", "testing")
    clean_env.setenv("AWS_DEFAULT_REGION", "us-east-1")
    clean_env.delenv("AWS_PROFILE", raising=False)


@pytest.fixture(scope="session")
def moto_endpoint():
    """
    Run a moto S3 server for the whole session.

    aiobotocore talks HTTP to it, which avoids patching botocore in-process.
    """
    from moto.server import ThreadedMotoServer

    server = ThreadedMotoServer(ip_address="127.0.0.1", port=0, verbose=False)
    server.start()
    host, port = server.get_host_and_port()
    yield f"http://{host}:{port}"
    server.stop()


@pytest.fixture
def bucket_name() -> str:
    """Unique bucket per test; the moto server is shared."""
    return f"test-bucket-{uuid.uuid4().hex[:12]}"


@pytest.fixture
def moto_config(bucket_name: str, moto_endpoint: str):
    from s3cleaner.config import CleanerConfig

    return CleanerConfig(
        bucket=bucket_name,
        region="us-east-1",
        endpoint_url=moto_endpoint,
    )


@pytest_asyncio.fixture
async def s3_client(moto_config, aws_credentials):
    """aiobotocore S3 client connected to moto, with the test bucket created."""
    from s3cleaner.storage import create_session, open_s3_client

    async with open_s3_client(create_session(), moto_config) as client:
        await client.create_bucket(Bucket=moto_config.bucket)
        yield client


async def upload_test_objects(s3_client, bucket: str, keys: Iterable[str]) -> None:
    """Upload small objects to S3."""
    for key in keys:
        await s3_client.put_object(Bucket=bucket, Key=key, Body=b"test content")


async def list_bucket_keys(s3_client, bucket: str) -> List[str]:
    """Return every key currently stored in the bucket."""
    keys: List[str] = []
    paginator = s3_client.get_paginator("list_objects_v2")
    async for page in paginator.paginate(Bucket=bucket):
        keys.extend(obj["Key"] for obj in page.get("Contents", []))
    return keys


def seed_bucket(config, keys: Iterable[str]) -> None:
    """Create the bucket and upload keys from synchronous tests."""
    from s3cleaner.storage import create_session, open_s3_client

    async def _seed() -> None:
        async with open_s3_client(create_session(), config) as client:
            await client.create_bucket(Bucket=config.bucket)
            await upload_test_objects(client, config.bucket, keys)

    asyncio.run(_seed())


def bucket_keys(config) -> List[str]:
    """List a bucket from synchronous tests."""
    from s3cleaner.storage import create_session, open_s3_client

    async def _list() -> List[str]:
        async with open_s3_client(create_session(), config) as client:
            return await list_bucket_keys(client, config.bucket)

    return asyncio.run(_list())


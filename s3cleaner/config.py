# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
S3 Bucket Cleaner Configuration - Immutable configuration data structure.

The configuration is frozen after creation so a run cannot change its
bucket, threshold or mode halfway through.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import List
import re

from s3cleaner.errors import (
    explain_invalid_page_size,
    explain_missing_bucket,
    explain_missing_region,
)

# Delete objects older than this when no max age is given
DEFAULT_MAX_AGE = timedelta(days=90)

# S3 returns at most 1000 keys per ListObjectsV2 page
MAX_PAGE_SIZE = 1000


def _validate_bucket_name(bucket: str) -> bool:
    """
    Validate S3 bucket name according to AWS rules.

    Rules:
    - 3-63 characters
    - Lowercase letters, numbers, hyphens, periods
    - Must start and end with letter or number
    - No consecutive periods
    - Not formatted as IP address
    """
    if len(bucket) < 3 or len(bucket) > 63:
        return False

    if not re.match(r"^[a-z0-9][a-z0-9.-]*[a-z0-9]$", bucket):
        return False

    if ".." in bucket:
        return False

    if re.match(r"^\d+\.\d+\.\d+\.\d+$", bucket):
        return False

    return True


@dataclass(frozen=True)
class CleanerConfig:
    """
    Immutable configuration for one cleanup run.

    Only bucket and region are required; everything else has a default
    matching the command line defaults.
    """

    # Required: bucket to clean
    bucket: str

    # Required: bucket region, used only to open the S3 session
    region: str

    # Objects strictly older than this are deleted
    max_age: timedelta = DEFAULT_MAX_AGE

    # Report candidates without deleting anything
    dry_run: bool = False

    # MaxKeys for each ListObjectsV2 page
    page_size: int = MAX_PAGE_SIZE

    # Custom endpoint for S3-compatible storage
    endpoint_url: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration after creation."""
        errors: List[str] = []

        if not self.bucket:
            errors.append(explain_missing_bucket())
        elif not _validate_bucket_name(self.bucket):
            errors.append(f"Invalid bucket name: {self.bucket}")

        if not self.region:
            errors.append(explain_missing_region())

        if self.max_age < timedelta(0):
            errors.append(f"max_age must be >= 0, got {self.max_age}")

        if (
            isinstance(self.page_size, bool)
            or not isinstance(self.page_size, int)
            or not 1 <= self.page_size <= MAX_PAGE_SIZE
        ):
            errors.append(explain_invalid_page_size(self.page_size))

        # Raise all errors at once
        if errors:
            from s3cleaner.exceptions import ConfigurationError

            raise ConfigurationError(
                "Configuration validation failed",
                details={"errors": errors},
            )

    def with_updates(self, **kwargs) -> "CleanerConfig":
        """
        Create a new config with updated values.

        Since the config is frozen, this creates a new instance.
        """
        from dataclasses import asdict

        current = asdict(self)
        current.update(kwargs)
        return CleanerConfig(**current)

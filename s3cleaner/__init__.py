# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
S3 Bucket Cleaner - Age-based retention cleanup for S3 buckets.

Lists every object in a bucket, deletes the ones older than a maximum age
in one batch, and can run in dry-run mode to only report what would go.
Package name: s3cleaner.
"""

__version__ = "0.1.0"

# Time sources
from s3cleaner.clock import Clock, FixedClock, RealClock

# Configuration
from s3cleaner.config import DEFAULT_MAX_AGE, CleanerConfig
from s3cleaner.env import create_config_from_env, parse_duration

# Storage
from s3cleaner.storage import DeleteReport, ObjectRecord, S3Gateway, StorageGateway

# Core pipeline
from s3cleaner.core import CleanupResult, clean_up_objects, run_cleanup

__all__ = [
    # Version
    "__version__",
    # Time sources
    "Clock",
    "FixedClock",
    "RealClock",
    # Configuration
    "DEFAULT_MAX_AGE",
    "CleanerConfig",
    "create_config_from_env",
    "parse_duration",
    # Storage
    "DeleteReport",
    "ObjectRecord",
    "S3Gateway",
    "StorageGateway",
    # Core pipeline
    "CleanupResult",
    "clean_up_objects",
    "run_cleanup",
]

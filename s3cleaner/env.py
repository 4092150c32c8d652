# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Environment-based configuration helpers and duration parsing.

These helpers build a CleanerConfig from well-known environment variables
and turn human duration strings such as "90d" or "1h30m" into timedelta
values.
"""

from __future__ import annotations

import os
import re
from datetime import timedelta
from typing import Any

from s3cleaner.config import DEFAULT_MAX_AGE, MAX_PAGE_SIZE, CleanerConfig
from s3cleaner.errors import (
    explain_invalid_duration,
    explain_invalid_page_size,
    explain_missing_bucket,
    explain_missing_region,
)
from s3cleaner.exceptions import ConfigurationError

_DURATION_PART = re.compile(r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(ns|us|µs|ms|s|m|h|d|w)")

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
}

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def parse_duration(value: str | None) -> timedelta:
    """
    Parse a duration string into a timedelta.

    Accepts Go-style compound durations ("45m", "1h30m", "2160h", "1.5h")
    extended with days and weeks ("90d", "2w"). A bare integer is a number
    of seconds. Negative durations are rejected.
    """

    if value is None:
        raise ConfigurationError(explain_invalid_duration(value))

    text = value.strip()
    if not text:
        raise ConfigurationError(explain_invalid_duration(value))

    # str.isdigit() also accepts non-ASCII digits such as "\u00b2"
    if text.isascii() and text.isdigit():
        seconds: float = int(text)
    else:
        seconds = 0.0
        pos = 0
        while pos < len(text):
            match = _DURATION_PART.match(text, pos)
            if not match:
                raise ConfigurationError(explain_invalid_duration(value))
            seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
            pos = match.end()

    try:
        return timedelta(seconds=seconds)
    except (ValueError, OverflowError) as exc:
        raise ConfigurationError(explain_invalid_duration(value)) from exc


def format_duration(value: timedelta) -> str:
    """Render a timedelta in the compact form parse_duration accepts."""

    if value < timedelta(0):
        return "-" + format_duration(-value)

    seconds = int(value.total_seconds())
    millis = value.microseconds // 1000
    parts = []
    for suffix, size in (("d", 86400), ("h", 3600), ("m", 60), ("s", 1)):
        amount, seconds = divmod(seconds, size)
        if amount:
            parts.append(f"{amount}{suffix}")
    if millis:
        parts.append(f"{millis}ms")
    return "".join(parts) or "0s"


def _parse_bool(name: str, value: str | None) -> bool:
    if value is None:
        return False
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ConfigurationError(
        f"Invalid {name} value: {value!r}. Expected one of: true, false, 1, 0, yes, no."
    )


def _parse_page_size(value: str | None) -> int:
    if not value:
        return MAX_PAGE_SIZE
    try:
        size = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(explain_invalid_page_size(value)) from exc
    if not 1 <= size <= MAX_PAGE_SIZE:
        raise ConfigurationError(explain_invalid_page_size(value))
    return size


def create_config_from_env(**overrides: Any) -> CleanerConfig:
    """
    Create a CleanerConfig from environment variables.

    Keyword overrides win over the environment; overrides set to None are
    ignored so CLI options can be passed straight through.

    Required:
        - BUCKET_NAME: Name of the bucket to clean
        - BUCKET_REGION: Bucket region (falls back to AWS_REGION)

    Optional environment variables:
        - CLEANER_MAX_AGE: Duration such as "90d" or "36h" (default: 90d)
        - CLEANER_DRY_RUN: true/false (default: false)
        - CLEANER_PAGE_SIZE: Listing page size, 1-1000 (default: 1000)
        - AWS_ENDPOINT_URL: Endpoint of an S3-compatible service
    """

    values: dict[str, Any] = {
        "bucket": os.getenv("BUCKET_NAME"),
        "region": os.getenv("BUCKET_REGION") or os.getenv("AWS_REGION"),
        "endpoint_url": os.getenv("AWS_ENDPOINT_URL") or None,
    }

    # Only parse what no override replaces, so a stale variable cannot
    # break a run that sets the value explicitly
    if overrides.get("max_age") is None:
        max_age_env = os.getenv("CLEANER_MAX_AGE")
        values["max_age"] = parse_duration(max_age_env) if max_age_env else DEFAULT_MAX_AGE
    if overrides.get("dry_run") is None:
        values["dry_run"] = _parse_bool("CLEANER_DRY_RUN", os.getenv("CLEANER_DRY_RUN"))
    if overrides.get("page_size") is None:
        values["page_size"] = _parse_page_size(os.getenv("CLEANER_PAGE_SIZE"))

    values.update({k: v for k, v in overrides.items() if v is not None})

    if not values["bucket"]:
        raise ConfigurationError(explain_missing_bucket())
    if not values["region"]:
        raise ConfigurationError(explain_missing_region())

    return CleanerConfig(**values)

# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Human-friendly error message helpers for S3 Bucket Cleaner.

These helpers centralize wording for common configuration errors so that
the CLI, the environment loader and the pipeline present consistent,
actionable messages.
"""


def explain_missing_bucket() -> str:
    """
    Explain that the bucket name is missing.
    """

    return (
        "Bucket name is not set. "
        "Pass --bucket or set the BUCKET_NAME environment variable."
    )


def explain_missing_region() -> str:
    """
    Explain that the bucket region is missing.
    """

    return (
        "Bucket region is not set. "
        "Pass --region or set the BUCKET_REGION (or AWS_REGION) environment variable."
    )


def explain_invalid_duration(value: str | None) -> str:
    """
    Explain that a max age value could not be parsed.
    """

    return (
        f"Invalid duration value: {value!r}. "
        "Use a non-negative duration such as '90d', '36h', '1h30m' or '45m'."
    )


def explain_invalid_page_size(value: object) -> str:
    return f"Invalid page size: {value!r}. It must be an integer between 1 and 1000."


def explain_missing_credentials() -> str:
    """
    Explain that no AWS credentials could be resolved.
    """

    return (
        "Failed to get AWS credentials. "
        "Configure AWS_ACCESS_KEY_ID/AWS_SECRET_ACCESS_KEY, a shared profile, "
        "or an instance role."
    )

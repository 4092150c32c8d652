# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
S3 Bucket Cleaner Exceptions - Custom exceptions for the s3cleaner package.
"""


class S3CleanerError(Exception):
    """Base exception for all s3cleaner errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(S3CleanerError):
    """Raised when a required parameter is missing or invalid."""

    pass


class CredentialError(S3CleanerError):
    """Raised when the storage session cannot authenticate."""

    pass


class ListError(S3CleanerError):
    """Raised when enumerating bucket objects fails."""

    pass


class DeleteError(S3CleanerError):
    """Raised when a batch delete request fails outright."""

    pass

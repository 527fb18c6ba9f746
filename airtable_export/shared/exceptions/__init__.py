from airtable_export.shared.exceptions.base import AppException
from airtable_export.shared.exceptions.export import (
    AirtableApiError,
    ConfigurationError,
    ExportException,
    GitHubApiError,
)

__all__ = [
    "AppException",
    "ExportException",
    "ConfigurationError",
    "AirtableApiError",
    "GitHubApiError",
]

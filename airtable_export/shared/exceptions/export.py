"""
Excepciones del pipeline de exportación Airtable -> GitHub.
"""
from typing import Optional

from airtable_export.shared.exceptions.base import AppException


class ExportException(AppException):
    """Excepción base para errores del exportador."""

    def __init__(self, message: str, error_code: str = "EXPORT_ERROR", details=None):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details
        )


class ConfigurationError(ExportException):
    """Falta configuración obligatoria (credenciales)."""

    def __init__(self, variable: str):
        super().__init__(
            message=f"Define la variable de entorno {variable}.",
            error_code="CONFIGURATION_ERROR",
            details={"variable": variable}
        )


class AirtableApiError(ExportException):
    """Error de integración con Airtable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        details = {"status_code": status_code} if status_code is not None else None
        super().__init__(
            message=message,
            error_code="AIRTABLE_API_ERROR",
            details=details
        )
        self.status_code = status_code


class GitHubApiError(ExportException):
    """Error de integración con GitHub."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        details = {"status_code": status_code} if status_code is not None else None
        super().__init__(
            message=message,
            error_code="GITHUB_API_ERROR",
            details=details
        )
        self.status_code = status_code

"""
Configuracion central del exportador.
Lee variables de entorno (y un .env opcional) con valores por defecto.
"""
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from airtable_export.export.export_config import AirtableConfig, GitHubConfig
from airtable_export.shared.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Clase de configuracion del job.

    Credenciales obligatorias:
    - AIRTABLE_API_KEY
    - GITHUB_API_TOKEN

    El resto tiene valores por defecto y se puede sobreescribir por entorno.
    """

    # Airtable (origen)
    AIRTABLE_API_KEY: str = Field(default="")
    AIRTABLE_BASE_ID: str = Field(default="apppZX1QC3fl1RTBM")
    AIRTABLE_TABLE_NAME: str = Field(default="Web Export Test")
    AIRTABLE_LAST_MOD_FIELD: str = Field(default="Last Update")

    # GitHub (destino)
    GITHUB_API_TOKEN: str = Field(default="")
    GITHUB_USER: str = Field(default="zoul")
    GITHUB_REPO: str = Field(default="airtable-export")
    GITHUB_PATH: str = Field(default="data.json")
    GITHUB_COMMIT_MESSAGE: str = Field(default="Update data")
    # Vacio = rama por defecto del repositorio
    GITHUB_BRANCH: str = Field(default="")

    # Debounce: segundos minimos desde la ultima edicion
    EXPORT_TIME_THRESHOLD_S: int = Field(default=300, ge=0)
    HTTP_TIMEOUT_S: int = Field(default=30, gt=0)

    # Logging
    LOG_LEVEL: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        """Acepta el nivel en minusculas (LOG_LEVEL=debug)."""
        return value.strip().upper() if isinstance(value, str) else value

    def _require(self, name: str) -> str:
        value = getattr(self, name)
        if not value:
            raise ConfigurationError(name)
        return value

    def airtable_config(self) -> AirtableConfig:
        """Construye la configuracion de origen; falla si falta el token."""
        return AirtableConfig(
            api_key=self._require("AIRTABLE_API_KEY"),
            base_id=self.AIRTABLE_BASE_ID,
            table_name=self.AIRTABLE_TABLE_NAME,
            last_modified_field=self.AIRTABLE_LAST_MOD_FIELD,
        )

    def github_config(self) -> GitHubConfig:
        """Construye la configuracion de destino; falla si falta el token."""
        return GitHubConfig(
            api_key=self._require("GITHUB_API_TOKEN"),
            user=self.GITHUB_USER,
            repo=self.GITHUB_REPO,
            path=self.GITHUB_PATH,
            message=self.GITHUB_COMMIT_MESSAGE,
            branch=self.GITHUB_BRANCH or None,
        )


def get_settings() -> Settings:
    """Lee la configuracion actual del entorno."""
    return Settings()

"""
Configuración de origen (Airtable) y destino (GitHub) de la exportación.

Este módulo no realiza I/O: solo define configuración. Los valores se
construyen una vez al inicio (ver `core.config.Settings`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AirtableConfig:
    """
    Tabla Airtable de origen.

    - last_modified_field: campo con la fecha de última modificación
      (tipo "Last modified time" en Airtable).
    """

    api_key: str
    base_id: str
    table_name: str
    last_modified_field: str


@dataclass(frozen=True)
class GitHubConfig:
    """
    Archivo destino en un repositorio GitHub.

    NOTA: el archivo debe existir; su SHA actual es la precondición del update.
    """

    api_key: str
    user: str
    repo: str
    path: str
    message: str
    branch: Optional[str] = None

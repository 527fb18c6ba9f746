"""
Tipos y utilidades puras para el pipeline Airtable -> GitHub.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normaliza datetime a UTC (aware).

    Airtable suele devolver ISO8601 con zona; los campos de solo fecha
    llegan sin zona y se interpretan como UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(raw: Any) -> datetime:
    """
    Parsea un timestamp ISO8601 de Airtable, e.g. "2025-12-16T10:15:00.000Z".

    Levanta ValueError si el valor no es una fecha válida.
    """
    return ensure_utc(datetime.fromisoformat(str(raw).replace("Z", "+00:00")))


@dataclass(frozen=True)
class AirtableRecord:
    """Registro Airtable tal como lo devuelve la API."""

    record_id: str
    fields: dict[str, Any]
    created_time: Optional[str] = None


class ExportStatus(str, Enum):
    """Resultado de una corrida."""

    NO_DATA = "no_data"
    BELOW_THRESHOLD = "below_threshold"
    EXPORTED = "exported"
    # Solo como decisión del gate; una corrida nunca termina en este estado.
    PROCEED = "proceed"


@dataclass(frozen=True)
class ExportResult:
    status: ExportStatus
    last_update: Optional[datetime]
    record_count: int = 0
    commit_sha: Optional[str] = None

"""
Servicio de exportación Airtable -> GitHub.

Diseño (resumen):
- Lee la fecha del registro modificado más recientemente (1 registro, orden desc)
- Gate por umbral: si el último cambio es muy reciente, no exporta (debounce)
- Trae todos los registros y serializa solo sus fields (sin ids ni metadata)
- JSON con indentación 2 -> base64 -> create-or-update en GitHub con el SHA actual

Sin reintentos ni estado persistido: cada corrida re-deriva todo desde
Airtable y GitHub. Si las ediciones ocurren siempre por debajo del umbral,
la exportación puede no dispararse nunca; es el comportamiento esperado.
"""

from __future__ import annotations

import base64
import json
import math
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Optional

from loguru import logger

from airtable_export.shared.exceptions import AirtableApiError

from .airtable_client import AirtableClient
from .export_config import AirtableConfig, GitHubConfig
from .github_client import GitHubClient
from .types import ExportResult, ExportStatus, parse_timestamp, utc_now

if TYPE_CHECKING:
    from airtable_export.core.config import Settings

DEFAULT_TIME_THRESHOLD_S = 5 * 60


def get_last_modification_time(
    airtable: AirtableClient,
    table_name: str,
    last_modified_field: str,
) -> Optional[datetime]:
    """
    Retorna la fecha de modificación del registro más reciente.

    None si la tabla está vacía (o si el registro no tiene el campo cargado).
    """
    matches = airtable.select(
        table_name,
        fields=[last_modified_field],
        sort=[{"field": last_modified_field, "direction": "desc"}],
        max_records=1,
    )
    if not matches:
        return None

    most_recent = matches[0]
    raw = most_recent.fields.get(last_modified_field)
    if raw in (None, ""):
        return None

    try:
        return parse_timestamp(raw)
    except (ValueError, TypeError) as e:
        raise AirtableApiError(
            f"No se pudo parsear '{last_modified_field}' del record {most_recent.record_id}: {raw}"
        ) from e


def should_export(
    last_update: Optional[datetime],
    now: datetime,
    time_threshold_s: float = DEFAULT_TIME_THRESHOLD_S,
) -> ExportStatus:
    """
    Gate por umbral: NO_DATA, BELOW_THRESHOLD o PROCEED.
    """
    if last_update is None:
        return ExportStatus.NO_DATA

    time_since_last_update = (now - last_update).total_seconds()
    if time_since_last_update < time_threshold_s:
        return ExportStatus.BELOW_THRESHOLD
    return ExportStatus.PROCEED


def js_number(value: float) -> str:
    """
    Formatea un float como `Number.prototype.toString` de JavaScript.

    repr() ya da los dígitos más cortos; solo cambia dónde se pasa a notación
    exponencial y cómo se escribe el exponente (1e-7, 1e+21).
    """
    if math.isnan(value) or math.isinf(value):
        return "null"
    if value == 0:
        return "0"
    if value < 0:
        return "-" + js_number(-value)

    mantissa, _, exp = repr(value).partition("e")
    int_part, _, frac = mantissa.partition(".")
    raw = int_part + frac
    leading_zeros = len(raw) - len(raw.lstrip("0"))
    digits = raw.strip("0")
    # value = 0.<digits> * 10**n
    n = len(int_part) + (int(exp) if exp else 0) - leading_zeros
    k = len(digits)

    if k <= n <= 21:
        return digits + "0" * (n - k)
    if 0 < n <= 21:
        return digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return "0." + "0" * (-n) + digits

    e = n - 1
    sign = "+" if e >= 0 else "-"
    head = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{head}e{sign}{abs(e)}"


def _stringify(value: Any, indent: str) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return js_number(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)

    inner = indent + "  "
    if isinstance(value, dict):
        if not value:
            return "{}"
        items = [
            f"{inner}{json.dumps(str(k), ensure_ascii=False)}: {_stringify(v, inner)}"
            for k, v in value.items()
        ]
        return "{\n" + ",\n".join(items) + "\n" + indent + "}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        items = [f"{inner}{_stringify(v, inner)}" for v in value]
        return "[\n" + ",\n".join(items) + "\n" + indent + "]"

    raise TypeError(f"Tipo no serializable a JSON: {type(value).__name__}")


def to_json(data: Any) -> str:
    """
    Serializa igual que `JSON.stringify(data, null, 2)`.

    json.dumps difiere en los floats (1e-07 vs 1e-7, 1e+16 vs 10000000000000000),
    por eso la estructura se arma aquí y json solo escapa los strings.
    """
    return _stringify(data, "")


def to_base64(text: str) -> str:
    """Codifica texto (UTF-8) en base64."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class AirtableToGitHubExport:
    """
    Orquestador del pipeline para una tabla y un archivo destino.
    """

    def __init__(
        self,
        *,
        airtable: AirtableClient,
        github: GitHubClient,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._airtable = airtable
        self._github = github
        self._clock = clock

    def run_once(
        self,
        airtable_config: AirtableConfig,
        github_config: GitHubConfig,
        time_threshold_s: float = DEFAULT_TIME_THRESHOLD_S,
    ) -> ExportResult:
        """
        Ejecuta una corrida: CHECKING -> {DONE (skip) | EXPORTING -> DONE}.
        """
        # Sin fecha utilizable (vacía o inválida) no se exporta;
        # el job en TS sí exportaba con Invalid Date.
        last_update = get_last_modification_time(
            self._airtable,
            airtable_config.table_name,
            airtable_config.last_modified_field,
        )

        status = should_export(last_update, self._clock(), time_threshold_s)
        if status is ExportStatus.NO_DATA:
            logger.warning("No se pudo determinar la última actualización de la tabla, sin cambios.")
            return ExportResult(status=status, last_update=None)

        if status is ExportStatus.BELOW_THRESHOLD:
            logger.info(
                f"Última actualización por debajo del umbral ({time_threshold_s} segundos), "
                f"se omite la exportación."
            )
            return ExportResult(status=status, last_update=last_update)

        logger.info("Última actualización por encima del umbral, se intentará exportar.")
        matches = self._airtable.select(airtable_config.table_name)
        upload_data = to_base64(to_json([m.fields for m in matches]))

        current_sha = self._github.get_file_sha(github_config.path)
        commit_sha = self._github.create_or_update_file(
            github_config.path,
            message=github_config.message,
            content=upload_data,
            sha=current_sha,
        )

        logger.success(
            f"Exportados {len(matches)} registros de '{airtable_config.table_name}' a "
            f"{github_config.user}/{github_config.repo}:{github_config.path}"
        )
        return ExportResult(
            status=ExportStatus.EXPORTED,
            last_update=last_update,
            record_count=len(matches),
            commit_sha=commit_sha,
        )


def build_from_settings(settings: Settings) -> tuple[AirtableToGitHubExport, AirtableConfig, GitHubConfig]:
    """
    Constructor “oficial” del pipeline a partir de Settings.

    Valida credenciales antes de crear clientes: si falta alguna se levanta
    ConfigurationError sin haber hecho ninguna llamada de red.
    """
    airtable_config = settings.airtable_config()
    github_config = settings.github_config()

    airtable = AirtableClient(
        airtable_config.api_key,
        airtable_config.base_id,
        timeout_s=settings.HTTP_TIMEOUT_S,
    )
    github = GitHubClient(
        github_config.api_key,
        github_config.user,
        github_config.repo,
        branch=github_config.branch,
        timeout_s=settings.HTTP_TIMEOUT_S,
    )
    service = AirtableToGitHubExport(airtable=airtable, github=github)
    return service, airtable_config, github_config

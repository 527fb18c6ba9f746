"""
Punto de entrada: Airtable -> GitHub (exportación one-shot).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer), p.ej. cada 5 minutos.

Variables de entorno requeridas:
  - AIRTABLE_API_KEY
  - GITHUB_API_TOKEN

Ejecución:
  airtable-export
  python -m airtable_export
"""

from __future__ import annotations

import sys

from loguru import logger
from pydantic import ValidationError

from airtable_export.core.config import get_settings
from airtable_export.export.export_service import build_from_settings
from airtable_export.shared.exceptions import ConfigurationError

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"


def configure_logging(level: str = "INFO") -> None:
    """Deja un único sink en stderr con el nivel indicado."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)


def main() -> int:
    configure_logging()

    try:
        settings = get_settings()
        configure_logging(settings.LOG_LEVEL)
        service, airtable_config, github_config = build_from_settings(settings)
    except ConfigurationError as e:
        logger.error(e.message)
        return 1
    except ValidationError as e:
        logger.error(f"Configuración inválida: {e}")
        return 1

    logger.info(
        f"Iniciando exportación Airtable '{airtable_config.table_name}' -> "
        f"GitHub {github_config.user}/{github_config.repo}:{github_config.path}"
    )
    try:
        result = service.run_once(
            airtable_config,
            github_config,
            time_threshold_s=settings.EXPORT_TIME_THRESHOLD_S,
        )
    except Exception:
        logger.exception("La exportación falló:")
        return 1

    logger.info(f"Corrida finalizada: status={result.status.value}, records={result.record_count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

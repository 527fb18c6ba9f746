"""
Cliente mínimo de Airtable REST API (sin SDKs externos).

Requisitos cubiertos:
- requests
- proyección de campos, orden y límite de resultados (select)
- paginación por offset
- rate-limit/backoff (429)
"""

from __future__ import annotations

import time
from typing import Any, Optional
from urllib.parse import quote

import requests
from loguru import logger

from airtable_export.shared.exceptions import AirtableApiError

from .types import AirtableRecord


class AirtableClient:
    """
    Cliente HTTP de Airtable para una base.

    Importante:
    - No hace cast de tipos de campos: los valores se exportan tal cual.
    - select() trae todas las páginas, igual que `select().all()` del SDK oficial.
    """

    def __init__(
        self,
        api_key: str,
        base_id: str,
        *,
        session: Optional[requests.Session] = None,
        base_url: str = "https://api.airtable.com/v0",
        timeout_s: int = 30,
        max_retries: int = 5,
        min_backoff_s: float = 0.8,
        max_backoff_s: float = 20.0,
        page_size: int = 100,
    ) -> None:
        self._api_key = api_key
        self._base_id = base_id
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._min_backoff_s = min_backoff_s
        self._max_backoff_s = max_backoff_s
        self._page_size = page_size
        self._session = session or requests.Session()

    def select(
        self,
        table_name: str,
        *,
        fields: Optional[list[str]] = None,
        sort: Optional[list[dict[str, str]]] = None,
        max_records: Optional[int] = None,
    ) -> list[AirtableRecord]:
        """
        Consulta registros de una tabla.

        Sin argumentos devuelve todos los registros, sin filtro.

        Args:
            table_name: Nombre o ID de la tabla
            fields: Campos a devolver (proyección)
            sort: Lista de {"field": ..., "direction": "asc"|"desc"}
            max_records: Límite total de registros
        """
        url = f"{self._base_url}/{self._base_id}/{quote(table_name, safe='')}"
        offset: Optional[str] = None
        records: list[AirtableRecord] = []

        while True:
            # Airtable espera fields[] repetido y sort[i][field]; por eso la
            # query se arma como lista de tuplas.
            query: list[tuple[str, Any]] = [("pageSize", self._page_size)]
            if max_records is not None:
                query.append(("maxRecords", max_records))
            for f in fields or []:
                query.append(("fields[]", f))
            for i, s in enumerate(sort or []):
                query.append((f"sort[{i}][field]", s["field"]))
                query.append((f"sort[{i}][direction]", s.get("direction", "asc")))
            if offset:
                query.append(("offset", offset))

            payload = self._request_json("GET", url, query=query)

            for rec in payload.get("records") or []:
                rec_id = rec.get("id")
                if not rec_id:
                    # Caso raro; preferimos fallar temprano y visible.
                    raise AirtableApiError("Airtable devolvió un record sin 'id'")
                records.append(
                    AirtableRecord(
                        record_id=rec_id,
                        fields=rec.get("fields") or {},
                        created_time=rec.get("createdTime"),
                    )
                )

            offset = payload.get("offset")
            if not offset:
                break
            if max_records is not None and len(records) >= max_records:
                break

        logger.debug(f"Airtable '{table_name}': {len(records)} registros leídos")
        return records

    def _request_json(
        self, method: str, url: str, *, query: list[tuple[str, Any]]
    ) -> dict[str, Any]:
        """
        Request HTTP con backoff para 429.

        Estrategia:
        - 429: respeta Retry-After si existe, si no exponencial con jitter simple.
        - Cualquier otro no-2xx: error inmediato.
        """
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        for attempt in range(self._max_retries + 1):
            resp = self._session.request(
                method=method,
                url=url,
                params=query,
                headers=headers,
                timeout=self._timeout_s,
            )

            if 200 <= resp.status_code < 300:
                return resp.json()

            if resp.status_code == 429:
                if attempt >= self._max_retries:
                    raise AirtableApiError(
                        f"Airtable error 429 tras {attempt} reintentos: {resp.text}",
                        status_code=resp.status_code,
                    )

                retry_after = resp.headers.get("Retry-After")
                if retry_after:
                    try:
                        sleep_s = float(retry_after)
                    except ValueError:
                        sleep_s = self._min_backoff_s
                else:
                    base = min(self._max_backoff_s, self._min_backoff_s * (2**attempt))
                    sleep_s = base + (0.15 * base)

                logger.warning(f"Airtable rate limit (429), reintentando en {sleep_s:.1f}s")
                time.sleep(sleep_s)
                continue

            raise AirtableApiError(
                f"Airtable request falló {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )

        # Inalcanzable: el último intento siempre retorna o levanta.
        raise AirtableApiError("Airtable request sin respuesta")

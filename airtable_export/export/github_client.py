"""
Cliente mínimo de la API de contenidos de GitHub.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import requests
from loguru import logger

from airtable_export.shared.exceptions import GitHubApiError


class GitHubClient:
    """
    Lee y escribe archivos de un repositorio vía `/repos/{owner}/{repo}/contents`.

    El update es atómico del lado de GitHub: el SHA actual del archivo se
    envía como precondición y GitHub rechaza la escritura si quedó obsoleto.
    """

    def __init__(
        self,
        api_key: str,
        owner: str,
        repo: str,
        *,
        branch: Optional[str] = None,
        session: Optional[requests.Session] = None,
        base_url: str = "https://api.github.com",
        timeout_s: int = 30,
    ) -> None:
        self._api_key = api_key
        self._owner = owner
        self._repo = repo
        self._branch = branch or None
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._session = session or requests.Session()

    def _contents_url(self, path: str) -> str:
        return (
            f"{self._base_url}/repos/{self._owner}/{self._repo}"
            f"/contents/{quote(path.lstrip('/'), safe='/')}"
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def get_file_sha(self, path: str) -> str:
        """
        Retorna el SHA (blob) actual del archivo.

        Si el archivo no existe GitHub responde 404 y se levanta GitHubApiError.
        """
        params = {"ref": self._branch} if self._branch else None
        resp = self._session.get(
            self._contents_url(path),
            headers=self._headers(),
            params=params,
            timeout=self._timeout_s,
        )
        payload = self._check(resp, f"lectura de '{path}'")

        sha = payload.get("sha") if isinstance(payload, dict) else None
        if not sha:
            raise GitHubApiError(f"GitHub no devolvió SHA para '{path}' (¿es un directorio?)")
        return sha

    def create_or_update_file(self, path: str, *, message: str, content: str, sha: str) -> Optional[str]:
        """
        Crea o actualiza el archivo con contenido base64.

        Args:
            path: Ruta dentro del repositorio
            message: Mensaje del commit
            content: Contenido codificado en base64
            sha: SHA actual del archivo (precondición)

        Returns:
            SHA del commit creado, si GitHub lo informa
        """
        body: dict[str, Any] = {"message": message, "content": content, "sha": sha}
        if self._branch:
            body["branch"] = self._branch

        resp = self._session.put(
            self._contents_url(path),
            headers=self._headers(),
            json=body,
            timeout=self._timeout_s,
        )
        payload = self._check(resp, f"escritura de '{path}'")

        commit_sha = (payload.get("commit") or {}).get("sha")
        logger.debug(f"GitHub commit {commit_sha} en {self._owner}/{self._repo}:{path}")
        return commit_sha

    @staticmethod
    def _check(resp: requests.Response, action: str) -> Any:
        if 200 <= resp.status_code < 300:
            return resp.json()
        raise GitHubApiError(
            f"GitHub {action} falló {resp.status_code}: {resp.text}",
            status_code=resp.status_code,
        )

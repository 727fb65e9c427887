"""Clients that read scheme files from a hosted repository.

``GhCliClient`` shells out to the authenticated ``gh`` command, the way
the site build has always fetched schemes. ``HttpClient`` talks to the
same GitHub contents API over ``httpx`` for hosts without ``gh``.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from typing import Mapping, Optional, Protocol, Sequence

import httpx

from ..errors import NotFoundError, RetrievalError

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
GITHUB_API_URL = "https://api.github.com"
GH_TOKEN_ENV_VARS = ("GH_TOKEN", "GITHUB_TOKEN")
SOURCE_NAME = "GitHub"


class RepositoryClient(Protocol):
    """Retrieve file content and directory listings at a ref."""

    def get_file_base64(self, repo: str, path: str, ref: str) -> str:
        """Return the base64 text of ``path`` in ``repo`` at ``ref``."""

    def list_directory(self, repo: str, path: str, ref: str) -> list[str]:
        """Return entry names under ``path`` in ``repo`` at ``ref``."""


def contents_endpoint(repo: str, path: str, ref: str) -> str:
    """Return the contents API path for ``path`` in ``repo`` at ``ref``."""

    return f"/repos/{repo}/contents/{path}?ref={ref}"


class GhCliClient:
    """Repository client backed by ``gh api``."""

    def __init__(
        self,
        *,
        executable: str = "gh",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.executable = executable
        self.timeout = timeout

    def get_file_base64(self, repo: str, path: str, ref: str) -> str:
        """Return the base64 ``content`` field for a file."""

        return self._api(repo, path, ref, jq=".content")

    def list_directory(self, repo: str, path: str, ref: str) -> list[str]:
        """Return the ``name`` of every entry in a directory."""

        output = self._api(repo, path, ref, jq=".[].name")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def _api(self, repo: str, path: str, ref: str, *, jq: str) -> str:
        command = self._command(contents_endpoint(repo, path, ref), jq)
        LOGGER.debug("Running %s", " ".join(command))
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                check=False,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise RetrievalError(
                f"gh api timed out after {self.timeout}s",
                source=f"{SOURCE_NAME}:{repo}",
                path=path,
            ) from exc
        except OSError as exc:
            raise RetrievalError(
                f"Failed to run {self.executable}: {exc}",
                source=f"{SOURCE_NAME}:{repo}",
                path=path,
            ) from exc

        stderr = completed.stderr.decode("utf-8", errors="replace").strip()
        if completed.returncode != 0:
            if "404" in stderr or "Not Found" in stderr:
                raise NotFoundError(
                    "No such file in repository",
                    source=f"{SOURCE_NAME}:{repo}",
                    path=path,
                )
            raise RetrievalError(
                f"gh api failed: {stderr or completed.returncode}",
                source=f"{SOURCE_NAME}:{repo}",
                path=path,
            )

        try:
            return completed.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RetrievalError(
                "gh api returned non UTF-8 output",
                source=f"{SOURCE_NAME}:{repo}",
                path=path,
            ) from exc

    def _command(self, endpoint: str, jq: str) -> Sequence[str]:
        executable = shutil.which(self.executable) or self.executable
        return (executable, "api", endpoint, "--jq", jq)


class HttpClient:
    """Repository client backed by the GitHub REST API over ``httpx``."""

    def __init__(
        self,
        *,
        base_url: str = GITHUB_API_URL,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        active_env = os.environ if env is None else env
        resolved_token = token or _token_from_env(active_env)
        headers = {"Accept": "application/vnd.github+json"}
        if resolved_token:
            headers["Authorization"] = f"Bearer {resolved_token}"
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Release the underlying connection pool."""

        self._client.close()

    def get_file_base64(self, repo: str, path: str, ref: str) -> str:
        """Return the base64 ``content`` field for a file."""

        payload = self._get_json(repo, path, ref)
        content = payload.get("content") if isinstance(payload, dict) else None
        if not isinstance(content, str):
            raise RetrievalError(
                "Contents response has no file content",
                source=f"{SOURCE_NAME}:{repo}",
                path=path,
            )
        return content

    def list_directory(self, repo: str, path: str, ref: str) -> list[str]:
        """Return the ``name`` of every entry in a directory."""

        payload = self._get_json(repo, path, ref)
        if not isinstance(payload, list):
            raise RetrievalError(
                "Contents response is not a directory listing",
                source=f"{SOURCE_NAME}:{repo}",
                path=path,
            )
        return [
            entry["name"]
            for entry in payload
            if isinstance(entry, dict) and isinstance(entry.get("name"), str)
        ]

    def _get_json(self, repo: str, path: str, ref: str) -> object:
        endpoint = f"/repos/{repo}/contents/{path}"
        try:
            response = self._client.get(endpoint, params={"ref": ref})
        except httpx.HTTPError as exc:
            raise RetrievalError(
                f"Request failed: {exc}",
                source=f"{SOURCE_NAME}:{repo}",
                path=path,
            ) from exc

        if response.status_code == 404:
            raise NotFoundError(
                "No such file in repository",
                source=f"{SOURCE_NAME}:{repo}",
                path=path,
            )
        if response.is_error:
            raise RetrievalError(
                f"GitHub API returned HTTP {response.status_code}",
                source=f"{SOURCE_NAME}:{repo}",
                path=path,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise RetrievalError(
                f"GitHub API returned invalid JSON: {exc}",
                source=f"{SOURCE_NAME}:{repo}",
                path=path,
            ) from exc


def _token_from_env(env: Mapping[str, str]) -> Optional[str]:
    for name in GH_TOKEN_ENV_VARS:
        value = env.get(name)
        if value:
            return value
    return None

"""Scheme provider for color schemes hosted in a GitHub repository."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Optional

from ..errors import ColorSchemeError, DecodeError
from ..formats import SchemeFormat, strip_listed_extension
from ..palette import ColorPalette
from ..parsing import parse_scheme
from ..structured import GHOSTTY_DIALECT
from .base import SchemeProvider, annotate_error
from .transport import GhCliClient, RepositoryClient

LOGGER = logging.getLogger(__name__)

DEFAULT_BRANCH = "master"


class GitHubSchemeProvider(SchemeProvider):
    """Fetch scheme files from ``repo`` at ``branch`` under ``path``."""

    def __init__(
        self,
        repo: str,
        scheme_format: SchemeFormat,
        *,
        branch: str = DEFAULT_BRANCH,
        path: str = "",
        client: Optional[RepositoryClient] = None,
        dialect: Optional[str] = None,
    ) -> None:
        self.repo = repo
        self.format = scheme_format
        self.branch = branch
        self.path = path.strip("/")
        self.client: RepositoryClient = client or GhCliClient()
        if dialect is None and "ghostty" in repo.lower():
            dialect = GHOSTTY_DIALECT
        self.dialect = dialect

    @classmethod
    def ghostty_colors(
        cls,
        client: Optional[RepositoryClient] = None,
    ) -> GitHubSchemeProvider:
        """Return a provider for ``ghostty-org/ghostty-colors``."""

        return cls(
            "ghostty-org/ghostty-colors",
            SchemeFormat.TOML,
            branch="main",
            path="themes",
            client=client,
        )

    @classmethod
    def iterm2_schemes(
        cls,
        client: Optional[RepositoryClient] = None,
    ) -> GitHubSchemeProvider:
        """Return a provider for ``mbadolato/iTerm2-Color-Schemes``."""

        return cls(
            "mbadolato/iTerm2-Color-Schemes",
            SchemeFormat.ITERM2,
            branch="master",
            path="schemes",
            client=client,
        )

    @classmethod
    def base16_schemes(
        cls,
        client: Optional[RepositoryClient] = None,
    ) -> GitHubSchemeProvider:
        """Return a provider for ``chriskempson/base16-schemes-source``."""

        return cls(
            "chriskempson/base16-schemes-source",
            SchemeFormat.YAML,
            branch="main",
            path="list.yaml",
            client=client,
        )

    def resolve_path(self, name: str) -> str:
        """Return the repository path for scheme ``name``."""

        file_name = self.format.filename(name)
        if not self.path:
            return file_name
        return f"{self.path}/{file_name}"

    def fetch(self, name: str, variant: Optional[str] = None) -> ColorPalette:
        """Download, decode and parse scheme ``name``."""

        path = self.resolve_path(name)
        LOGGER.debug("Fetching %s from %s@%s", path, self.repo, self.branch)
        try:
            encoded = self.client.get_file_base64(
                self.repo,
                path,
                self.branch,
            )
            content = self._decode(encoded, path)
            return parse_scheme(content, self.format, dialect=self.dialect)
        except ColorSchemeError as exc:
            annotate_error(
                exc,
                scheme=name,
                source=f"GitHub:{self.repo}",
                path=path,
            )
            raise

    def list_available(self) -> set[str]:
        """Return scheme names found under the configured path."""

        entries = self.client.list_directory(self.repo, self.path, self.branch)
        names = set()
        for entry in entries:
            name = strip_listed_extension(entry.strip())
            if name is not None:
                names.add(name)
        return names

    def provider_name(self) -> str:
        """Return ``"GitHub"``."""

        return "GitHub"

    def _decode(self, encoded: str, path: str) -> str:
        cleaned = "".join(encoded.split())
        try:
            raw = base64.b64decode(cleaned, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecodeError(
                f"Failed to decode base64 content: {exc}",
                source=f"GitHub:{self.repo}",
                path=path,
            ) from exc
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(
                f"Invalid UTF-8 in decoded content: {exc}",
                source=f"GitHub:{self.repo}",
                path=path,
            ) from exc

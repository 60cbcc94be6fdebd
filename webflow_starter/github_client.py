"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

Used instead of the `gh` CLI when a `GITHUB_TOKEN` is configured. The client
satisfies the provisioner's `AuthProvider` and `KeyRegistry` protocols:
- `status()` / `login()`: token validity (there is no interactive login over REST)
- `list()` / `add()`: the authenticated user's SSH authentication keys
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests

from webflow_starter.provisioner import KeyListingError

logger = logging.getLogger(__name__)


class GitHubError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class SSHKeyInfo:
    id: int
    title: str
    key: str


class GitHubClient:
    def __init__(self, token: str, api_base: str = "https://api.github.com") -> None:
        if not token.strip():
            raise GitHubError("GitHub token is required.")
        self._api_base = api_base.rstrip("/")
        self._auth_headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "webflow-starter",
        }

    def _send(self, method: str, url: str, *, json_body: dict[str, Any] | None = None) -> requests.Response:
        logger.debug("GitHub API %s %s", method, url)
        try:
            r = requests.request(method, url, headers=self._auth_headers, json=json_body, timeout=30)
        except requests.RequestException as e:
            raise GitHubError(f"Could not reach GitHub ({method} {url}): {e}") from e
        if r.status_code >= 400:
            try:
                message = r.json().get("message", "")
            except (ValueError, AttributeError):
                message = r.text
            raise GitHubError(f"GitHub API error {r.status_code} {method} {url}: {message}", status_code=r.status_code)
        return r

    def _get_all(self, path: str) -> list[dict[str, Any]]:
        """Collect every page of a list endpoint by following `Link: rel="next"`."""
        items: list[dict[str, Any]] = []
        url: str | None = f"{self._api_base}{path}?per_page=100"
        while url:
            r = self._send("GET", url)
            items.extend(r.json() or [])
            url = (r.links or {}).get("next", {}).get("url")
        return items

    def viewer_login(self) -> str:
        data = self._send("GET", f"{self._api_base}/user").json()
        return str(data.get("login") or "")

    def list_ssh_keys(self) -> list[SSHKeyInfo]:
        return [
            SSHKeyInfo(id=int(item["id"]), title=str(item.get("title") or ""), key=str(item["key"]))
            for item in self._get_all("/user/keys")
        ]

    def add_ssh_key(self, *, title: str, key: str) -> SSHKeyInfo:
        data = self._send("POST", f"{self._api_base}/user/keys", json_body={"title": title, "key": key}).json()
        return SSHKeyInfo(id=int(data["id"]), title=str(data.get("title") or title), key=str(data["key"]))

    # AuthProvider

    def status(self) -> bool:
        """False only when GitHub rejects the token; other failures raise `GitHubError`."""
        try:
            login = self.viewer_login()
        except GitHubError as e:
            if e.status_code == 401:
                logger.debug("Token rejected: %s", e)
                return False
            raise
        logger.debug("Authenticated to GitHub as %s", login)
        return True

    def login(self) -> None:
        raise GitHubError("GITHUB_TOKEN was rejected by GitHub. Refresh it, or unset it to log in with `gh`.")

    # KeyRegistry

    def list(self) -> str:
        try:
            keys = self.list_ssh_keys()
        except GitHubError as e:
            raise KeyListingError(str(e)) from e
        return "\n".join(f"{k.title}\t{k.key}" for k in keys)

    def add(self, pub_key_path: Path, title: str) -> None:
        key = Path(pub_key_path).read_text(encoding="utf-8").strip()
        self.add_ssh_key(title=title, key=key)

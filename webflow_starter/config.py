"""
config.py

Responsibility: Runtime settings, read once from the environment.

| variable                          | default                   |
|-----------------------------------|---------------------------|
| WEBFLOW_STARTER_HOME              | the user's home directory |
| WEBFLOW_STARTER_PACKAGE_MANAGER   | npm                       |
| WEBFLOW_STARTER_TEMPLATE_DIR      | packaged `templates/base` |
| GITHUB_TOKEN                      | unset (use the `gh` CLI)  |
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from webflow_starter.renderer import DEFAULT_TEMPLATE_DIR

SSH_KEY_NAME = "id_ed25519"


@dataclass(frozen=True)
class Settings:
    home: Path
    package_manager: str = "npm"
    template_dir: Path = DEFAULT_TEMPLATE_DIR
    github_token: str | None = None

    @property
    def ssh_key_path(self) -> Path:
        return self.home / ".ssh" / SSH_KEY_NAME

    @property
    def ssh_pub_key_path(self) -> Path:
        return self.ssh_key_path.with_name(f"{SSH_KEY_NAME}.pub")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        home = env.get("WEBFLOW_STARTER_HOME") or ""
        template_dir = env.get("WEBFLOW_STARTER_TEMPLATE_DIR") or ""
        return cls(
            home=Path(home).expanduser() if home else Path.home(),
            package_manager=(env.get("WEBFLOW_STARTER_PACKAGE_MANAGER") or "npm").strip() or "npm",
            template_dir=Path(template_dir).expanduser() if template_dir else DEFAULT_TEMPLATE_DIR,
            github_token=(env.get("GITHUB_TOKEN") or "").strip() or None,
        )

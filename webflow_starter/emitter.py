"""
emitter.py

Responsibility: Produce the two generated files of a new project.

- `starter.config.js`: CDN + deploy settings read by the build/deploy plugins
- `package.json`: name, scripts and pinned dev tooling

Both files are built as structured records first and then serialized, so
user-supplied text (project name, GitHub user, branch) always ends up inside
a properly escaped string literal. Output depends only on the answers.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from webflow_starter.answers import GitMode, SetupAnswers
from webflow_starter.renderer import TEMPLATE_ROOT

CDN_BASE_URL = "https://cdn.jsdelivr.net/gh"
STARTER_CONFIG_FILENAME = "starter.config.js"
PACKAGE_JSON_FILENAME = "package.json"

MANIFEST_DATA_PATH = Path(__file__).resolve().parent / "data" / "manifest.yaml"


class ManifestError(ValueError):
    pass


@dataclass(frozen=True)
class ManifestDefaults:
    """Fixed parts of package.json, loaded from packaged YAML."""

    version: str
    scripts: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)


def _string_mapping(data: dict[str, Any], key: str) -> dict[str, str]:
    raw = data.get(key) or {}
    if not isinstance(raw, dict):
        raise ManifestError(f"`{key}` must be a mapping.")
    return {str(k): str(v) for k, v in raw.items()}


def load_manifest_defaults(path: str | Path = MANIFEST_DATA_PATH) -> ManifestDefaults:
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ManifestError("Manifest data must be a mapping at the top level.")
    version = str(data.get("version") or "").strip()
    if not version:
        raise ManifestError("Manifest data must define `version`.")
    # Insertion order from the YAML file is kept; it is the order written to package.json.
    return ManifestDefaults(
        version=version,
        scripts=_string_mapping(data, "scripts"),
        dev_dependencies=_string_mapping(data, "devDependencies"),
    )


@lru_cache(maxsize=1)
def _default_manifest() -> ManifestDefaults:
    return load_manifest_defaults()


@lru_cache(maxsize=1)
def _jinja_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_ROOT)),
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )


def build_starter_config(answers: SetupAnswers) -> dict[str, dict[str, Any]]:
    cdn: dict[str, Any] = {
        "baseUrl": CDN_BASE_URL,
        "user": answers.cdn_user,
        "repo": answers.cdn_repo,
        "branch": answers.cdn_branch,
    }
    if answers.is_org:
        cdn["org"] = True

    deploy: dict[str, Any] = {"mode": answers.git_mode.value}
    if answers.git_mode is not GitMode.NONE:
        deploy["publicRepo"] = answers.cdn_repo
    if answers.git_mode is GitMode.SPLIT:
        deploy["privateRepo"] = answers.project_name
    deploy["branch"] = answers.cdn_branch

    return {"cdn": cdn, "deploy": deploy}


def render_starter_config(answers: SetupAnswers) -> str:
    template = _jinja_env().get_template(f"{STARTER_CONFIG_FILENAME}.j2")
    return template.render(config=build_starter_config(answers))


def build_package_manifest(answers: SetupAnswers, defaults: ManifestDefaults | None = None) -> dict[str, Any]:
    defaults = defaults or _default_manifest()
    return {
        "name": answers.project_name,
        "version": defaults.version,
        "private": True,
        "type": "module",
        "scripts": dict(defaults.scripts),
        "devDependencies": dict(defaults.dev_dependencies),
    }


def render_package_json(answers: SetupAnswers) -> str:
    return json.dumps(build_package_manifest(answers), indent=2) + "\n"


def write_starter_config(answers: SetupAnswers, project_dir: str | Path) -> Path:
    path = Path(project_dir) / STARTER_CONFIG_FILENAME
    path.write_text(render_starter_config(answers), encoding="utf-8", newline="\n")
    return path


def write_package_json(answers: SetupAnswers, project_dir: str | Path) -> Path:
    path = Path(project_dir) / PACKAGE_JSON_FILENAME
    path.write_text(render_package_json(answers), encoding="utf-8", newline="\n")
    return path

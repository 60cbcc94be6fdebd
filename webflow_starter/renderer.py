"""
renderer.py

Responsibility: Copy the project template tree into a destination directory.

Rules:
- Walk template files in sorted order so the copy sequence is deterministic.
- Copy files byte-for-byte, preserving permissions; existing files are overwritten.
- Files shipped without their leading dot (packaging tools drop dotfiles like
  `.gitignore`) are renamed once they reach the destination.

This module does NOT generate config files; see `emitter.py`.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

TEMPLATE_ROOT = Path(__file__).resolve().parent / "templates"
DEFAULT_TEMPLATE_DIR = TEMPLATE_ROOT / "base"

# Root-level files that become dotfiles in the generated project.
DOTFILE_RENAMES = ("gitignore",)


class RenderError(RuntimeError):
    pass


@dataclass(frozen=True)
class RenderResult:
    copied_files: int
    renamed_files: int


def _template_files(template_dir: Path) -> list[Path]:
    """Relative paths of every file (dotfiles included), ordered by POSIX path."""
    return sorted(
        (p.relative_to(template_dir) for p in template_dir.rglob("*") if p.is_file()),
        key=lambda rel: rel.as_posix(),
    )


def _rename_dotfiles(destination_dir: Path) -> int:
    renamed = 0
    for name in DOTFILE_RENAMES:
        src = destination_dir / name
        if src.is_file():
            # os.replace overwrites a .gitignore left by an earlier run.
            os.replace(src, destination_dir / f".{name}")
            renamed += 1
    return renamed


def copy_template_dir(
    *,
    template_dir: str | Path = DEFAULT_TEMPLATE_DIR,
    destination_dir: str | Path,
) -> RenderResult:
    """
    Copy template_dir into destination_dir recursively.

    The destination is created if needed. Filesystem errors are not caught.
    """
    tpl_dir = Path(template_dir).resolve()
    dst_dir = Path(destination_dir).resolve()

    if not tpl_dir.is_dir():
        raise RenderError(f"Template directory not found: {tpl_dir}")

    copied = 0
    for rel in _template_files(tpl_dir):
        dst_path = dst_dir / rel
        dst_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(tpl_dir / rel, dst_path)
        copied += 1

    renamed = _rename_dotfiles(dst_dir)
    logger.debug("Copied %d template files into %s (%d renamed)", copied, dst_dir, renamed)
    return RenderResult(copied_files=copied, renamed_files=renamed)

"""
answers.py

Responsibility: The in-memory record produced by the interview and consumed by
every later setup stage.

The record is frozen: once the interview returns it, nothing mutates it. The
CDN repository name is derived on access rather than stored twice.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path


class AnswersError(ValueError):
    pass


class GitMode(str, enum.Enum):
    """How many remote repositories back the project."""

    NONE = "none"
    PUBLIC_ONLY = "public-only"
    SPLIT = "split"


DEFAULT_PROJECT_NAME = "my-webflow-project"
DEFAULT_BRANCH = "main"


@dataclass(frozen=True)
class SetupAnswers:
    """Answers collected by the interview."""

    project_name: str
    create_folder: bool = True
    git_mode: GitMode = GitMode.PUBLIC_ONLY
    cdn_user: str = ""
    is_org: bool = False
    cdn_branch: str = DEFAULT_BRANCH
    public_repo_name: str = ""

    def __post_init__(self) -> None:
        if not self.project_name.strip():
            raise AnswersError("Project name is required.")
        # Accept plain strings for convenience at call sites and in tests.
        object.__setattr__(self, "git_mode", GitMode(self.git_mode))
        if self.git_mode is GitMode.SPLIT and not self.public_repo_name.strip():
            raise AnswersError("A public repo name is required in split mode.")

    @property
    def cdn_repo(self) -> str:
        """
        Repository served through the CDN, which is also the repository the
        deploy step publishes to.
        """
        if self.git_mode is GitMode.SPLIT:
            return self.public_repo_name
        return self.project_name

    @property
    def uses_git(self) -> bool:
        return self.git_mode is not GitMode.NONE

    def destination(self, cwd: str | Path) -> Path:
        base = Path(cwd)
        return base / self.project_name if self.create_folder else base

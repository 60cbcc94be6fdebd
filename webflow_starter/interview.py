"""
interview.py

Responsibility: Ask the setup questions and turn the answers into `SetupAnswers`.

Questions are asked in a fixed order. Later questions are skipped based on
earlier answers:
- CDN user / organization / branch only when a git mode other than `none` is chosen
- public production repo name only in `split` mode

The prompting mechanism is behind the `Prompter` protocol so the interview can
be driven by scripted answers in tests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Protocol, Union

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from webflow_starter.answers import DEFAULT_BRANCH, DEFAULT_PROJECT_NAME, GitMode, SetupAnswers

logger = logging.getLogger(__name__)

# Returns True when the value is accepted, otherwise the message to show before re-asking.
Validator = Callable[[str], Union[bool, str]]


class PromptCancelled(RuntimeError):
    def __init__(self, message: str = "Operation cancelled.") -> None:
        super().__init__(message)


class Prompter(Protocol):
    def text(self, message: str, *, default: str | None = None, validate: Validator | None = None) -> str: ...

    def confirm(self, message: str, *, default: bool = True) -> bool: ...

    def select(self, message: str, choices: Sequence[tuple[str, str]], *, default: str) -> str: ...


class RichPrompter:
    """Terminal prompter backed by `rich.prompt`."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def text(self, message: str, *, default: str | None = None, validate: Validator | None = None) -> str:
        while True:
            with _cancellable():
                if default is None:
                    value = Prompt.ask(message, console=self.console)
                else:
                    value = Prompt.ask(message, default=default, console=self.console)
            result = validate(value) if validate is not None else True
            if result is True:
                return value
            self.console.print(f"[red]{escape(str(result))}[/red]")

    def confirm(self, message: str, *, default: bool = True) -> bool:
        with _cancellable():
            return Confirm.ask(message, default=default, console=self.console)

    def select(self, message: str, choices: Sequence[tuple[str, str]], *, default: str) -> str:
        self.console.print(escape(message))
        numbers: list[str] = []
        default_number = "1"
        for idx, (title, value) in enumerate(choices, start=1):
            self.console.print(f"  [cyan]{idx}[/cyan]. {escape(title)}")
            numbers.append(str(idx))
            if value == default:
                default_number = str(idx)
        with _cancellable():
            picked = Prompt.ask("Choice", choices=numbers, default=default_number, console=self.console)
        return choices[int(picked) - 1][1]


@contextmanager
def _cancellable() -> Iterator[None]:
    """Translate Ctrl-C / end-of-input at a prompt into `PromptCancelled`."""
    try:
        yield
    except (KeyboardInterrupt, EOFError) as e:
        raise PromptCancelled() from e


GIT_MODE_CHOICES: tuple[tuple[str, str], ...] = (
    ("None (no remote Git setup)", GitMode.NONE.value),
    ("Single public repo (source + dist)", GitMode.PUBLIC_ONLY.value),
    ("Private source repo + public production repo", GitMode.SPLIT.value),
)


def required(message: str = "This field is required.") -> Validator:
    def _check(value: str) -> bool | str:
        return True if value.strip() else message

    return _check


def run_interview(prompter: Prompter) -> SetupAnswers:
    """
    Ask every setup question and return the resulting answers.

    Raises `PromptCancelled` if the user aborts any prompt.
    """
    project_name = prompter.text(
        "Project name", default=DEFAULT_PROJECT_NAME, validate=required()
    ).strip()
    create_folder = prompter.confirm("Create a new folder for the project?", default=True)
    git_mode = GitMode(
        prompter.select(
            "How do you want to manage Git repositories?",
            GIT_MODE_CHOICES,
            default=GitMode.PUBLIC_ONLY.value,
        )
    )

    cdn_user = ""
    is_org = False
    cdn_branch = DEFAULT_BRANCH
    if git_mode is not GitMode.NONE:
        cdn_user = prompter.text("GitHub user/org for CDN").strip()
        is_org = prompter.confirm("Is this a GitHub organization?", default=False)
        cdn_branch = prompter.text("Branch name", default=DEFAULT_BRANCH).strip() or DEFAULT_BRANCH

    public_repo_name = ""
    if git_mode is GitMode.SPLIT:
        public_repo_name = prompter.text(
            "Name for the public production repo",
            default=f"{project_name}-prod",
            validate=required(),
        ).strip()

    answers = SetupAnswers(
        project_name=project_name,
        create_folder=create_folder,
        git_mode=git_mode,
        cdn_user=cdn_user,
        is_org=is_org,
        cdn_branch=cdn_branch,
        public_repo_name=public_repo_name,
    )
    logger.debug("Interview answers: %s", answers)
    return answers

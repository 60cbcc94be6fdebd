"""Shared fakes for the webflow-starter test suite."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from webflow_starter.interview import PromptCancelled, Validator
from webflow_starter.provisioner import KeyListingError


class ScriptedPrompter:
    """
    Answers prompts from a queue, in order.

    `None` in the queue means "accept the default". `PromptCancelled` in the
    queue is raised instead of answering.
    """

    def __init__(self, answers: Iterable[Any]) -> None:
        self.answers: deque[Any] = deque(answers)
        self.calls: list[tuple[str, str]] = []
        self.rejections: list[str] = []

    def _next(self, kind: str, message: str) -> Any:
        self.calls.append((kind, message))
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        value = self.answers.popleft()
        if value is PromptCancelled:
            raise PromptCancelled()
        return value

    def text(self, message: str, *, default: str | None = None, validate: Validator | None = None) -> str:
        while True:
            value = self._next("text", message)
            if value is None:
                value = default or ""
            result = validate(value) if validate is not None else True
            if result is True:
                return value
            self.rejections.append(str(result))

    def confirm(self, message: str, *, default: bool = True) -> bool:
        value = self._next("confirm", message)
        return default if value is None else bool(value)

    def select(self, message: str, choices: Sequence[tuple[str, str]], *, default: str) -> str:
        value = self._next("select", message)
        picked = default if value is None else value
        assert picked in [v for _title, v in choices]
        return picked


class FakeAuth:
    def __init__(self, statuses: Iterable[bool]) -> None:
        self.statuses = deque(statuses)
        self.status_calls = 0
        self.login_calls = 0

    def status(self) -> bool:
        self.status_calls += 1
        return self.statuses.popleft()

    def login(self) -> None:
        self.login_calls += 1


class FakeRegistry:
    def __init__(self, listing: str = "", error: str | None = None) -> None:
        self.listing = listing
        self.error = error
        self.list_calls = 0
        self.added: list[tuple[Path, str]] = []

    def list(self) -> str:
        self.list_calls += 1
        if self.error is not None:
            raise KeyListingError(self.error)
        return self.listing

    def add(self, pub_key_path: Path, title: str) -> None:
        self.added.append((pub_key_path, title))


class FakeKeygen:
    PUBLIC_KEY = "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIFakeKeyData user@example.com\n"

    def __init__(self) -> None:
        self.generated: list[tuple[Path, str]] = []

    def generate(self, key_path: Path, email: str) -> None:
        self.generated.append((key_path, email))
        key_path.parent.mkdir(parents=True, exist_ok=True)
        key_path.write_text("private\n", encoding="utf-8")
        key_path.with_name(key_path.name + ".pub").write_text(self.PUBLIC_KEY, encoding="utf-8")


@pytest.fixture
def console() -> Console:
    return Console(record=True, width=120, force_terminal=False)


@pytest.fixture
def ssh_dir(tmp_path: Path) -> Path:
    d = tmp_path / "home" / ".ssh"
    d.mkdir(parents=True)
    return d


@pytest.fixture
def existing_key(ssh_dir: Path) -> Path:
    key_path = ssh_dir / "id_ed25519"
    key_path.write_text("private\n", encoding="utf-8")
    key_path.with_name("id_ed25519.pub").write_text(FakeKeygen.PUBLIC_KEY, encoding="utf-8")
    return key_path

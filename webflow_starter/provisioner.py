"""
provisioner.py

Responsibility: Make sure git-based deploys can work from this machine.

Three checks run in order, each safe to repeat:
1) a local ed25519 key pair exists (offer to generate one)
2) the GitHub CLI is authenticated (one interactive login attempt)
3) the public key is registered on GitHub (offer to add it)

External tools sit behind small protocols (`AuthProvider`, `KeyRegistry`,
`KeyGenerator`). The default implementations shell out to `gh` and
`ssh-keygen` with argument lists, never through a shell.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from rich.console import Console
from rich.markup import escape

from webflow_starter.interview import Prompter

logger = logging.getLogger(__name__)

# `gh ssh-key list` also queries signing keys; tokens without that scope fail
# with this text even though authentication keys were listed fine.
BENIGN_LISTING_WARNING = "ssh_signing_keys"

DEFAULT_KEY_TITLE = "my-dev-machine"


class ProvisionError(RuntimeError):
    pass


class KeyListingError(RuntimeError):
    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_captured(cmd: list[str]) -> CommandResult:
    """Run a probe command, capturing its output instead of raising on failure."""
    logger.debug("Running (captured): %s", " ".join(cmd))
    try:
        proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    except FileNotFoundError as e:
        raise ProvisionError(f"Command not found: {cmd[0]}") from e
    return CommandResult(returncode=proc.returncode, stdout=proc.stdout or "", stderr=proc.stderr or "")


def run_interactive(cmd: list[str], *, cwd: Path | None = None, check: bool = True) -> int:
    """Run a command with the terminal's stdin/stdout/stderr passed through."""
    logger.debug("Running: %s", " ".join(cmd))
    proc = subprocess.run(cmd, cwd=str(cwd) if cwd else None, check=check)
    return proc.returncode


class AuthProvider(Protocol):
    def status(self) -> bool: ...

    def login(self) -> None: ...


class KeyRegistry(Protocol):
    def list(self) -> str:
        """Return the registered keys as text; raise `KeyListingError` on failure."""
        ...

    def add(self, pub_key_path: Path, title: str) -> None: ...


class KeyGenerator(Protocol):
    def generate(self, key_path: Path, email: str) -> None: ...


class GhCliAuth:
    def status(self) -> bool:
        return run_captured(["gh", "auth", "status"]).ok

    def login(self) -> None:
        try:
            # The follow-up status probe decides whether this worked.
            run_interactive(["gh", "auth", "login"], check=False)
        except FileNotFoundError as e:
            raise ProvisionError("GitHub CLI (`gh`) is not installed.") from e


class GhCliKeyRegistry:
    def list(self) -> str:
        result = run_captured(["gh", "ssh-key", "list"])
        if not result.ok:
            raise KeyListingError(result.stderr or result.stdout or f"exit status {result.returncode}")
        return result.stdout

    def add(self, pub_key_path: Path, title: str) -> None:
        try:
            run_interactive(["gh", "ssh-key", "add", str(pub_key_path), "--title", title])
        except (OSError, subprocess.CalledProcessError) as e:
            raise ProvisionError("Failed to add SSH key to GitHub.") from e


class SshKeygen:
    def generate(self, key_path: Path, email: str) -> None:
        key_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        try:
            run_interactive(["ssh-keygen", "-t", "ed25519", "-C", email, "-f", str(key_path), "-N", ""])
        except (OSError, subprocess.CalledProcessError) as e:
            raise ProvisionError("ssh-keygen failed to generate a key.") from e


def key_prefix(pub_key: str) -> str:
    """Key type and base64 data, without the trailing comment."""
    return " ".join(pub_key.strip().split(" ")[:2])


def _valid_email(value: str) -> bool | str:
    return True if "@" in value else "Invalid email format"


class Provisioner:
    def __init__(
        self,
        *,
        prompter: Prompter,
        auth: AuthProvider,
        registry: KeyRegistry,
        keygen: KeyGenerator,
        key_path: Path,
        console: Console | None = None,
    ) -> None:
        self.prompter = prompter
        self.auth = auth
        self.registry = registry
        self.keygen = keygen
        self.key_path = Path(key_path)
        self.pub_key_path = self.key_path.with_name(self.key_path.name + ".pub")
        self.console = console or Console()

    def run(self) -> None:
        self.ensure_ssh_key()
        self.ensure_github_auth()
        self.ensure_key_registered()

    def ensure_ssh_key(self) -> bool:
        """Return True if a key pair exists when this step finishes."""
        name = self.key_path.name
        if self.key_path.exists() and self.pub_key_path.exists():
            self.console.print(f"[green]✓[/green] SSH key ({escape(name)}) found.")
            return True

        self.console.print(f"[yellow]No SSH key ({escape(name)}) found.[/yellow]")
        if not self.prompter.confirm("Generate a new SSH key (ed25519) for GitHub?", default=True):
            self.console.print("You can generate it manually with:")
            self.console.print(f'  ssh-keygen -t ed25519 -C "your-email@example.com" -f {escape(str(self.key_path))}')
            return False

        email = self.prompter.text(
            "Enter the email to associate with your SSH key", validate=_valid_email
        ).strip()
        self.console.print("Generating key...")
        self.keygen.generate(self.key_path, email)
        self.console.print(f"[green]✓[/green] SSH key generated at: {escape(str(self.key_path))}")
        return True

    def ensure_github_auth(self) -> None:
        if self.auth.status():
            self.console.print("[green]✓[/green] GitHub is authenticated.")
            return

        self.console.print("[yellow]GitHub CLI not authenticated. Running gh auth login...[/yellow]")
        self.auth.login()
        if not self.auth.status():
            raise ProvisionError("Still not authenticated. Aborting.")
        self.console.print("[green]✓[/green] GitHub is authenticated.")

    def ensure_key_registered(self) -> bool:
        """Return True if the local public key is registered on GitHub when this step finishes."""
        if not self.pub_key_path.exists():
            self.console.print(
                f"[yellow]No public key at {escape(str(self.pub_key_path))}; skipping GitHub registration.[/yellow]"
            )
            return False

        prefix = key_prefix(self.pub_key_path.read_text(encoding="utf-8"))
        key_exists = False
        try:
            listing = self.registry.list()
            key_exists = prefix in listing
        except KeyListingError as e:
            if BENIGN_LISTING_WARNING not in e.detail:
                raise ProvisionError("Failed to check SSH keys on GitHub.") from e
            self.console.print("[yellow]GitHub API warning (signing key scope missing): ignored.[/yellow]")

        if key_exists:
            self.console.print("[green]✓[/green] SSH key already exists on GitHub.")
            return True

        if not self.prompter.confirm("Do you want to add your SSH key to GitHub now?", default=True):
            self.console.print("[yellow]SSH key not added. You may need to do it manually.[/yellow]")
            return False

        title = self.prompter.text(
            "Enter a name for your SSH key (e.g. my-dev-machine)", default=DEFAULT_KEY_TITLE
        ).strip() or DEFAULT_KEY_TITLE
        self.registry.add(self.pub_key_path, title)
        self.console.print("[green]✓[/green] SSH key added to GitHub.")
        return True

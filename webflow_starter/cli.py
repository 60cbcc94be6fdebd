"""
cli.py

Responsibility: CLI entrypoint for webflow-starter.

High-level flow (one interactive run, no subcommands):
1) Interview -> `SetupAnswers`
2) Copy the template tree into the destination
3) Write `starter.config.js` and `package.json`
4) (Only when a git mode is chosen) SSH key / GitHub auth / key registration
5) Install dependencies and print next steps

This module orchestrates; each concern lives in its own module:
- Interview: `interview.py`
- Template copy: `renderer.py`
- Generated files: `emitter.py`
- SSH / GitHub: `provisioner.py`, `github_client.py`
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from webflow_starter import __version__
from webflow_starter.answers import SetupAnswers
from webflow_starter.config import Settings
from webflow_starter.emitter import write_package_json, write_starter_config
from webflow_starter.github_client import GitHubClient, GitHubError
from webflow_starter.interview import Prompter, PromptCancelled, RichPrompter, run_interview
from webflow_starter.provisioner import (
    GhCliAuth,
    GhCliKeyRegistry,
    ProvisionError,
    Provisioner,
    SshKeygen,
    run_interactive,
)
from webflow_starter.renderer import RenderError, copy_template_dir

logger = logging.getLogger(__name__)


# Failures that end the run with a printed message and exit status 1.
FATAL_ERRORS = (PromptCancelled, ProvisionError, GitHubError, RenderError)


def build_provisioner(settings: Settings, prompter: Prompter, console: Console) -> Provisioner:
    if settings.github_token:
        logger.debug("GITHUB_TOKEN is set; using the GitHub REST API instead of `gh`")
        client = GitHubClient(settings.github_token)
        auth, registry = client, client
    else:
        auth, registry = GhCliAuth(), GhCliKeyRegistry()
    return Provisioner(
        prompter=prompter,
        auth=auth,
        registry=registry,
        keygen=SshKeygen(),
        key_path=settings.ssh_key_path,
        console=console,
    )


def materialize(answers: SetupAnswers, project_path: Path, *, settings: Settings, console: Console) -> None:
    if answers.create_folder:
        project_path.mkdir(parents=True, exist_ok=True)
        console.print(f"Creating project at: [bold]{escape(str(project_path))}[/bold]")
    else:
        console.print(f"Installing in current folder: [bold]{escape(str(project_path))}[/bold]")

    copy_template_dir(template_dir=settings.template_dir, destination_dir=project_path)
    write_starter_config(answers, project_path)
    write_package_json(answers, project_path)


def next_steps(answers: SetupAnswers, package_manager: str) -> str:
    lines = []
    if answers.create_folder:
        lines.append(f"cd {answers.project_name}")
    lines.append(f"{package_manager} run dev")
    return "\n".join(f"  {line}" for line in lines)


def finalize_setup(project_path: Path, answers: SetupAnswers, *, settings: Settings, console: Console) -> None:
    """
    Install dependencies, then print how to start.

    Installer failures propagate; files already written are left in place.
    """
    console.print("\nInstalling dependencies...")
    run_interactive([settings.package_manager, "install"], cwd=project_path)

    console.print("\n[green]✓[/green] Project is ready!\n")
    console.print(Panel(Text(next_steps(answers, settings.package_manager)), title="To start", expand=False))


def run_setup(
    *,
    settings: Settings,
    prompter: Prompter,
    console: Console,
    cwd: Path | None = None,
    provisioner: Provisioner | None = None,
) -> SetupAnswers:
    answers = run_interview(prompter)
    project_path = answers.destination(cwd or Path.cwd()).resolve()

    materialize(answers, project_path, settings=settings, console=console)

    if answers.uses_git:
        (provisioner or build_provisioner(settings, prompter, console)).run()

    finalize_setup(project_path, answers, settings=settings, console=console)
    return answers


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="webflow-starter",
        description="Create a new Webflow project (interactive)",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every external command")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    console = Console()
    console.print("\n[bold]Create a new webflow project[/bold]\n")
    try:
        run_setup(settings=Settings.from_env(), prompter=RichPrompter(console), console=console)
    except FATAL_ERRORS as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

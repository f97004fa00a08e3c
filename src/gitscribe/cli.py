"""
Command line interface for gitscribe.

This module defines the ``main`` function used as the entry point of
the ``gitscribe`` command. It locates the repository, loads the
configuration, runs the commit message pipeline and prints the result.
With ``--commit`` the message is used to create the commit after
confirmation. Exit codes are listed below.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

import click

from gitscribe import __version__
from gitscribe.config.loader import ConfigError, load_config
from gitscribe.credentials import SecretError
from gitscribe.llm.base import LLMError
from gitscribe.llm.commit_message_generator import (
    CommitMessageGenerator,
    NothingToCommitError,
)
from gitscribe.vcs.git_client import GitClient, GitError

# Module-level logger with a null handler. When logging is configured by
# the CLI, root handlers will be added and messages will propagate.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_NO_CHANGES = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_LLM_FAILURE = 7
EXIT_DECLINED = 8

PROVIDER_CHOICES = ["ollama", "gemini", "local", "cloud", "google"]


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Print a message when a step starts and its duration when it ends."""

    def __init__(self, message: str) -> None:
        self.message = message
        self.start_time = 0.0

    def __enter__(self) -> "ProgressIndicator":
        self.start_time = time.time()
        click.echo(f"→ {self.message}...", err=True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        elapsed = time.time() - self.start_time
        if exc_type is None:
            click.echo(f"  ✓ Done ({elapsed:.1f}s)", err=True)
        return False


def print_info(message: str, indent: int = 0) -> None:
    click.echo(f"{'  ' * indent}ℹ {message}", err=True)


def print_success(message: str, indent: int = 0) -> None:
    click.echo(f"{'  ' * indent}✓ {message}", err=True)


def print_warning(message: str, indent: int = 0) -> None:
    click.echo(f"{'  ' * indent}⚠ {message}", err=True)


def print_error(message: str, indent: int = 0) -> None:
    click.echo(f"{'  ' * indent}✗ {message}", err=True)


def print_message_box(message: str) -> None:
    """Print the commit message framed, for review before committing."""
    width = max([len(line) for line in message.splitlines()] + [20])
    click.echo("┌" + "─" * (width + 2) + "┐", err=True)
    for line in message.splitlines():
        click.echo(f"│ {line.ljust(width)} │", err=True)
    click.echo("└" + "─" * (width + 2) + "┘", err=True)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

@click.command()
@click.option(
    "--provider",
    "-p",
    type=click.Choice(PROVIDER_CHOICES, case_sensitive=False),
    help="Language model backend (defaults to the configured provider, then ollama).",
)
@click.option("--model", "-m", help="Model name (defaults to the provider's configured model).")
@click.option("--staged-only", is_flag=True, help="Describe staged changes only.")
@click.option("--context", "-c", help="Extra context about the change for the language model.")
@click.option("--commit", "do_commit", is_flag=True, help="Commit with the generated message.")
@click.option("--yes", "yes", is_flag=True, help="Commit without asking for confirmation.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="gitscribe")
def main(
    provider: Optional[str],
    model: Optional[str],
    staged_only: bool,
    context: Optional[str],
    do_commit: bool,
    yes: bool,
    verbose: bool,
) -> None:
    """Generate a commit message for the current Git repository.

    Each changed text file is summarized by a language model and the
    summaries are combined into one commit message, which is printed
    on standard output.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    ctx = click.get_current_context(silent=True)

    try:
        repo_root = GitClient.find_repo_root(Path.cwd())
        if repo_root is None:
            print_error("No Git repository found in current directory or parent directories.")
            raise click.exceptions.Exit(EXIT_NO_REPO)
        logger.debug("Repository root: %s", repo_root)

        try:
            settings = load_config()
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        client = GitClient(repo_root)
        generator = CommitMessageGenerator(settings, client)

        try:
            with ProgressIndicator("Summarizing changes and generating the commit message"):
                message = generator.generate_commit_message(
                    provider=provider,
                    model=model,
                    staged_only=staged_only,
                    context=context,
                )
        except NothingToCommitError as exc:
            print_warning(str(exc))
            raise click.exceptions.Exit(EXIT_NO_CHANGES)
        except SecretError as exc:
            print_error(f"Credential error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)
        except LLMError as exc:
            print_error(f"LLM error: {exc}")
            print_info("Make sure the language model server is running and reachable", indent=1)
            raise click.exceptions.Exit(EXIT_LLM_FAILURE)

        if not do_commit:
            click.echo(message)
            raise click.exceptions.Exit(EXIT_SUCCESS)

        print_message_box(message)
        if not yes and not click.confirm("Commit with this message?", default=True, err=True):
            print_warning("Commit declined; nothing was committed.")
            raise click.exceptions.Exit(EXIT_DECLINED)

        try:
            if generator.included_unstaged:
                client.stage_all()
            client.commit(message)
        except GitError as exc:
            print_error(f"Failed to commit changes: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)
        print_success("Changes committed.")
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)

"""
Commit message generation using an LLM.

This module provides the :class:`CommitMessageGenerator` class, which
runs the whole pipeline for one commit:

1. collect the staged (and, unless told otherwise, unstaged) paths,
2. split them into text files and binary change groups,
3. fetch and summarize each text file's diff with the language model,
4. render the per-file summaries and binary counts as one text block,
5. ask the language model for the final commit message.

Files whose diff cannot be read are skipped. Language model failures
abort the run: no partial commit message is ever returned.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple, Union

from gitscribe.config.settings import Provider, Settings
from gitscribe.diff.fetcher import DiffFetcher
from gitscribe.diff.scanner import ChangeSetScanner
from gitscribe.llm.base import LLMClient
from gitscribe.llm.factory import create_client, resolve_model, resolve_provider
from gitscribe.llm.prompts import build_commit_prompt
from gitscribe.summary.builder import build_change_summary
from gitscribe.summary.models import ChangeSet, FileChange, FileStatus, PromptPair
from gitscribe.summary.summarizer import DiffSummarizer
from gitscribe.vcs.git_client import GitClient, GitError


logger = logging.getLogger(__name__)
# Attach a null handler to prevent logging errors when no handlers are
# configured on the root logger. Logs will propagate when configured.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


ClientFactory = Callable[..., LLMClient]


class NothingToCommitError(Exception):
    """Raised when neither staged nor unstaged changes exist."""

    pass


class CommitMessageGenerator:
    """Generate a commit message for the pending changes of a repository.

    Parameters
    ----------
    settings : Settings
        Loaded configuration; never modified.
    git_client : GitClient
        Client for the repository whose changes are described.
    client_factory : callable, optional
        Builds the language model client; called as
        ``client_factory(provider, settings, model)``. Defaults to
        :func:`~gitscribe.llm.factory.create_client`.
    scanner : ChangeSetScanner, optional
        Defaults to a scanner rooted at the repository root.
    fetcher : DiffFetcher, optional
        Defaults to a fetcher using ``git_client``.
    """

    def __init__(
        self,
        settings: Settings,
        git_client: GitClient,
        client_factory: ClientFactory = create_client,
        scanner: Optional[ChangeSetScanner] = None,
        fetcher: Optional[DiffFetcher] = None,
    ) -> None:
        self.settings = settings
        self.git_client = git_client
        self.client_factory = client_factory
        self.scanner = scanner or ChangeSetScanner(git_client.repo_root)
        self.fetcher = fetcher or DiffFetcher(git_client)
        # Set by generate_commit_message; tells callers what to stage
        self.included_unstaged = False

    # ------------------------------------------------------------------
    # Resolution helpers
    # ------------------------------------------------------------------
    def resolve_provider(self, provider: Optional[Union[str, Provider]] = None) -> Provider:
        return resolve_provider(provider, self.settings)

    def resolve_model(self, provider: Provider, model: Optional[str] = None) -> str:
        return resolve_model(provider, model, self.settings)

    def collect_paths(self, staged_only: bool) -> Tuple[List[str], List[str], bool]:
        """Return ``(staged, unstaged, staged_only)``.

        ``staged_only`` is switched off when nothing is staged but the
        working tree has changes, so that those are not dropped silently.

        Raises
        ------
        NothingToCommitError
            If there are no changes at all.
        GitError
            If listing the changes fails.
        """
        staged = self.git_client.list_changed_paths(staged=True)
        unstaged: List[str] = []
        if not staged_only or not staged:
            unstaged = self.git_client.list_changed_paths(staged=False)
        if staged_only and not staged and unstaged:
            logger.warning("No staged changes; including unstaged changes instead")
            staged_only = False
        if staged_only:
            unstaged = []
        if not staged and not unstaged:
            raise NothingToCommitError("Nothing to commit: no staged or unstaged changes")
        return staged, unstaged, staged_only

    def _file_change(self, path: str, staged_paths: List[str]) -> FileChange:
        staged = path in staged_paths
        try:
            status = self.git_client.get_status(path, staged=staged)
        except GitError as exc:
            logger.warning("Could not read status of %s: %s", path, exc)
            status = FileStatus.UNKNOWN
        return FileChange(path=path, staged=staged, status=status)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def build_change_set(
        self,
        staged: List[str],
        unstaged: List[str],
        client: LLMClient,
    ) -> ChangeSet:
        """Scan the paths and summarize every text file with ``client``.

        Files without a diff are skipped with a warning.
        """
        scan = self.scanner.scan(staged, unstaged)
        change_set = ChangeSet(binary_groups=list(scan.binary_groups))
        summarizer = DiffSummarizer(client)

        for path in scan.text_files:
            change = self._file_change(path, staged)
            diff = self.fetcher.get_diff(change.path, staged=change.staged)
            if diff is None:
                logger.warning("Skipping %s: no diff available", change.path)
                continue
            change_set.file_summaries.append(
                summarizer.summarize(diff, change.path, change.status)
            )
        return change_set

    @staticmethod
    def build_final_prompt(summary: str, context: Optional[str] = None) -> PromptPair:
        return build_commit_prompt(summary, context)

    def generate_commit_message(
        self,
        provider: Optional[Union[str, Provider]] = None,
        model: Optional[str] = None,
        staged_only: bool = False,
        context: Optional[str] = None,
    ) -> str:
        """Generate a commit message for the repository's pending changes.

        Parameters
        ----------
        provider : str or Provider, optional
            Backend to use; defaults to the configured provider, then Ollama.
        model : str, optional
            Model to use; defaults to the provider's configured model.
        staged_only : bool, optional
            Ignore unstaged changes (unless nothing is staged).
        context : str, optional
            Free text from the author, given priority in the final prompt.

        Returns
        -------
        str
            The commit message exactly as returned by the model.

        Raises
        ------
        NothingToCommitError
            If there are no changes.
        UnsupportedProviderError
            If ``provider`` is unknown.
        LLMError
            If a language model call fails.
        """
        selected = self.resolve_provider(provider)
        selected_model = self.resolve_model(selected, model)
        staged, unstaged, staged_only = self.collect_paths(staged_only)
        self.included_unstaged = bool(unstaged)
        logger.info(
            "Generating commit message with %s (%s) for %d staged and %d unstaged path(s)",
            selected.value,
            selected_model,
            len(staged),
            len(unstaged),
        )

        client = self.client_factory(selected, self.settings, selected_model)
        change_set = self.build_change_set(staged, unstaged, client)
        if change_set.is_empty():
            logger.warning("No file could be summarized; the message may be vague")
        summary = build_change_summary(change_set)
        prompt = self.build_final_prompt(summary, context)
        return client.generate(prompt)

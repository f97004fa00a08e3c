"""
Per-file diff summarization.

:class:`DiffSummarizer` derives line statistics and the file status
from a unified diff, then asks the language model for a short
narrative of the change.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Optional

from gitscribe.diff.stats import detect_status, parse_diff_stats
from gitscribe.llm.base import LLMClient
from gitscribe.llm.prompts import build_file_summary_prompt
from gitscribe.summary.models import DiffStats, FileStatus, FileSummary


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


NO_CHANGES = "No changes detected"


class DiffSummarizer:
    """Summarize single-file diffs with a language model client."""

    def __init__(self, client: LLMClient) -> None:
        self.client = client

    def summarize(
        self,
        diff_text: str,
        path: str,
        status: Optional[FileStatus] = None,
    ) -> FileSummary:
        """Return the :class:`FileSummary` for ``path``.

        Parameters
        ----------
        diff_text : str
            Unified diff of the file.
        path : str
            Repository-relative path of the file.
        status : FileStatus, optional
            Status reported by Git. When missing or ``UNKNOWN`` it is
            inferred from the diff headers.

        Raises
        ------
        LLMError
            If the language model call fails.
        """
        extension = PurePosixPath(path).suffix
        if not diff_text or not diff_text.strip():
            return FileSummary(
                file=path,
                status=status if status is not None else FileStatus.MODIFIED,
                extension=extension,
                stats=DiffStats(),
                narrative=NO_CHANGES,
            )

        stats = parse_diff_stats(diff_text)
        status = detect_status(diff_text, status)
        prompt = build_file_summary_prompt(path, status, extension, stats, diff_text)
        logger.debug(
            "Summarizing %s (%s, +%d -%d)", path, status.value, stats.added, stats.removed
        )
        narrative = self.client.generate(prompt).strip()
        return FileSummary(
            file=path,
            status=status,
            extension=extension,
            stats=stats,
            narrative=narrative,
        )

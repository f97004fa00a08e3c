"""
Change summaries.

:mod:`gitscribe.summary.models` holds the data model,
:mod:`gitscribe.summary.summarizer` turns one file's diff into a
:class:`FileSummary` and :mod:`gitscribe.summary.builder` renders a
whole :class:`ChangeSet` as text.
"""

from .models import (  # noqa: F401
    BinaryChangeGroup,
    ChangeSet,
    DiffStats,
    FileChange,
    FileStatus,
    FileSummary,
    PromptPair,
)

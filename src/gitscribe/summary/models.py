"""
Data models for change summaries.

These are the values that flow through one commit message generation:
per-file :class:`DiffStats` and :class:`FileSummary` records, the
:class:`BinaryChangeGroup` counts for files that never reach the
language model, and the :class:`ChangeSet` aggregating both.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class FileStatus(str, Enum):
    """How a file changed relative to the last commit."""

    NEW = "New"
    MODIFIED = "Modified"
    DELETED = "Deleted"
    RENAMED = "Renamed"
    UNKNOWN = "Unknown"


@dataclass
class FileChange:
    """A changed path together with where the change lives."""

    path: str
    staged: bool
    status: FileStatus = FileStatus.UNKNOWN


@dataclass(frozen=True)
class DiffStats:
    """Line statistics derived from a unified diff.

    Attributes
    ----------
    lines_changed : int
        Sum over all hunks of ``max(old_count, new_count)``.
    added : int
        Number of ``+`` lines, file markers excluded.
    removed : int
        Number of ``-`` lines, file markers excluded.
    """

    lines_changed: int = 0
    added: int = 0
    removed: int = 0


@dataclass(frozen=True)
class FileSummary:
    """The language model's description of one file's change."""

    file: str
    status: FileStatus
    extension: str
    stats: DiffStats
    narrative: str


@dataclass(frozen=True)
class BinaryChangeGroup:
    """Binary files sharing a directory and an extension."""

    directory: str
    extension: str
    count: int
    action: str  # "Added" or "Modified"


@dataclass
class ChangeSet:
    """Everything known about the changes of one generation run."""

    binary_groups: List[BinaryChangeGroup] = field(default_factory=list)
    file_summaries: List[FileSummary] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.binary_groups and not self.file_summaries


@dataclass(frozen=True)
class PromptPair:
    """System and user prompt for a single language model call."""

    system_prompt: str
    user_prompt: str

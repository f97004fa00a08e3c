"""
Line statistics and file status from unified diffs.

Only the parts of the unified diff grammar needed to count lines are
understood: hunk headers (``@@ -a,b +c,d @@``), ``+``/``-`` lines and
the ``+++``/``---`` file markers, plus the extended header lines Git
writes for new, deleted and renamed files.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

from gitscribe.summary.models import DiffStats, FileStatus


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def parse_hunk_header(line: str) -> Optional[Tuple[int, int, int, int]]:
    """Return ``(old_start, old_count, new_start, new_count)`` for a hunk header.

    Omitted counts default to 1. Returns None if ``line`` is not a
    well-formed header.
    """
    match = HUNK_HEADER.match(line)
    if not match:
        return None
    old_start, old_count, new_start, new_count = match.groups()
    return (
        int(old_start),
        int(old_count) if old_count is not None else 1,
        int(new_start),
        int(new_count) if new_count is not None else 1,
    )


def parse_diff_stats(diff_text: str) -> DiffStats:
    """Count added, removed and changed lines in ``diff_text``.

    ``lines_changed`` grows by ``max(old_count, new_count)`` per hunk,
    which for pure additions and pure deletions is the hunk's full
    length. It is an approximation: context lines inside a mixed hunk
    are counted too.
    """
    lines_changed = added = removed = 0
    for line in diff_text.splitlines():
        if line.startswith("@@ "):
            header = parse_hunk_header(line)
            if header is None:
                logger.debug("Skipping malformed hunk header: %s", line)
                continue
            _, old_count, _, new_count = header
            lines_changed += max(old_count, new_count)
        elif line.startswith("+++") or line.startswith("---"):
            continue
        elif line.startswith("+"):
            added += 1
        elif line.startswith("-"):
            removed += 1
    return DiffStats(lines_changed=lines_changed, added=added, removed=removed)


def detect_status(diff_text: str, status: Optional[FileStatus] = None) -> FileStatus:
    """Return ``status`` if known, else infer it from the diff's header lines."""
    if status is not None and status is not FileStatus.UNKNOWN:
        return status
    if "new file mode" in diff_text:
        return FileStatus.NEW
    if "deleted file mode" in diff_text:
        return FileStatus.DELETED
    if "rename from" in diff_text:
        return FileStatus.RENAMED
    return FileStatus.MODIFIED

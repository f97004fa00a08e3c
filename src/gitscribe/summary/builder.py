"""
Rendering of a :class:`ChangeSet` as one plain-text block.
"""

from __future__ import annotations

from typing import Dict, List

from gitscribe.summary.models import BinaryChangeGroup, ChangeSet, FileStatus, FileSummary


SECTION_TITLES = [
    ("new", "New Files:"),
    ("modified", "Modified Files:"),
    ("deleted", "Deleted Files:"),
    ("other", "Other Changes:"),
]
BINARY_TITLE = "Binary File Changes:"

_SECTION_FOR_STATUS = {
    FileStatus.NEW: "new",
    FileStatus.MODIFIED: "modified",
    FileStatus.DELETED: "deleted",
}


def format_file_line(summary: FileSummary) -> str:
    return f"- {summary.file}: {summary.narrative}"


def format_binary_line(group: BinaryChangeGroup) -> str:
    extension = group.extension or "(no extension)"
    return f"- {group.action} {group.count} {extension} files in {group.directory}"


def build_change_summary(change_set: ChangeSet) -> str:
    """Return the text summary of ``change_set``.

    File summaries are grouped into New, Modified, Deleted and Other
    sections, in that order, followed by the binary file counts.
    Sections without entries are left out, so an empty change set
    renders as an empty string.
    """
    sections: Dict[str, List[str]] = {key: [] for key, _ in SECTION_TITLES}
    for summary in change_set.file_summaries:
        key = _SECTION_FOR_STATUS.get(summary.status, "other")
        sections[key].append(format_file_line(summary))

    blocks: List[str] = []
    for key, title in SECTION_TITLES:
        if sections[key]:
            blocks.append("\n".join([title] + sections[key]))
    if change_set.binary_groups:
        lines = [format_binary_line(group) for group in change_set.binary_groups]
        blocks.append("\n".join([BINARY_TITLE] + lines))
    return "\n\n".join(blocks)

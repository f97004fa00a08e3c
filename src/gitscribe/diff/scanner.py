"""
Partitioning of changed paths into text and binary files.

Text files go on to be diffed and summarized one by one. Binary files
never reach the language model; they are only counted per directory
and extension.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Callable, Dict, Iterable, List

from gitscribe.diff.classifier import is_plain_text
from gitscribe.summary.models import BinaryChangeGroup


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


ADDED = "Added"
MODIFIED = "Modified"


@dataclass
class ScanResult:
    """Output of :meth:`ChangeSetScanner.scan`."""

    binary_groups: List[BinaryChangeGroup] = field(default_factory=list)
    text_files: List[str] = field(default_factory=list)


def merge_paths(staged: Iterable[str], unstaged: Iterable[str]) -> List[str]:
    """Return the union of both path lists, keeping first-seen order."""
    seen: Dict[str, None] = {}
    for path in list(staged) + list(unstaged):
        seen.setdefault(path, None)
    return list(seen)


class ChangeSetScanner:
    """Split changed paths into text files and binary change groups.

    Parameters
    ----------
    repo_root : Path
        Root of the repository; paths are resolved against it for
        classification.
    classifier : Callable[[Path], bool], optional
        Returns True for plain-text files. Defaults to
        :func:`~gitscribe.diff.classifier.is_plain_text`.
    """

    def __init__(
        self,
        repo_root: Path,
        classifier: Callable[[Path], bool] = is_plain_text,
    ) -> None:
        self.repo_root = repo_root
        self.classifier = classifier

    def _is_text(self, path: str) -> bool:
        absolute = (self.repo_root / path).resolve()
        try:
            return bool(self.classifier(absolute))
        except Exception as exc:
            logger.warning("Could not classify %s, treating it as binary: %s", path, exc)
            return False

    def scan(self, staged: Iterable[str], unstaged: Iterable[str]) -> ScanResult:
        """Classify the union of ``staged`` and ``unstaged`` paths.

        Binary paths are grouped by directory and then by extension.
        The action of every group in a directory is taken from the first
        binary file seen in that directory: "Added" if it is staged,
        "Modified" otherwise.
        """
        staged = list(staged)
        staged_set = set(staged)
        result = ScanResult()
        # directory -> extension -> paths, in scan order
        binaries: Dict[str, Dict[str, List[str]]] = {}

        for path in merge_paths(staged, unstaged):
            if self._is_text(path):
                result.text_files.append(path)
                continue
            directory = posixpath.dirname(path) or "."
            extension = PurePosixPath(path).suffix
            binaries.setdefault(directory, {}).setdefault(extension, []).append(path)

        for directory, by_extension in binaries.items():
            first = next(iter(by_extension.values()))[0]
            action = ADDED if first in staged_set else MODIFIED
            for extension, paths in by_extension.items():
                result.binary_groups.append(
                    BinaryChangeGroup(
                        directory=directory,
                        extension=extension,
                        count=len(paths),
                        action=action,
                    )
                )

        logger.debug(
            "Scanned %d text file(s) and %d binary group(s)",
            len(result.text_files),
            len(result.binary_groups),
        )
        return result

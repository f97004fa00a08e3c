"""
Per-file diff retrieval.

Fetching is best effort: a diff that cannot be produced is reported as
missing so that the caller can skip the file instead of aborting.
"""

from __future__ import annotations

import logging
from typing import Optional

from gitscribe.vcs.git_client import GitClient, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class DiffFetcher:
    """Read unified diffs for single files through a :class:`GitClient`."""

    def __init__(self, git_client: GitClient) -> None:
        self.git_client = git_client

    def get_diff(self, path: str, staged: bool) -> Optional[str]:
        """Return the trimmed diff of ``path``, or None if there is none.

        ``staged`` selects the index instead of the working tree. Git
        failures are logged and reported as None.
        """
        try:
            diff = self.git_client.get_diff(path, staged=staged)
        except GitError as exc:
            logger.warning("Could not read diff for %s: %s", path, exc)
            return None
        diff = (diff or "").strip()
        if not diff:
            logger.debug("No diff for %s (staged=%s)", path, staged)
            return None
        return diff

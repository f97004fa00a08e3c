"""
Version control integration.

gitscribe only talks to Git. :class:`GitClient` lists changed paths,
reads diffs and status lines, and commits the generated message.
"""

from .git_client import GitClient, GitError  # noqa: F401

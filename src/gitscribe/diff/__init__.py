"""
Diff handling for gitscribe.

Classifies changed files as text or binary, fetches per-file diffs and
derives line statistics from them.
"""

from .classifier import is_plain_text  # noqa: F401
from .fetcher import DiffFetcher  # noqa: F401
from .scanner import ChangeSetScanner, ScanResult  # noqa: F401
from .stats import detect_status, parse_diff_stats  # noqa: F401

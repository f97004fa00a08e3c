"""
Text/binary classification of changed files.

A file counts as plain text when it is valid UTF-8 and contains no
control characters other than tab, line feed and carriage return.
Anything that cannot be read is treated as binary.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# 0x00-0x08, 0x0B, 0x0C and 0x0E-0x1F; 0x09 (tab), 0x0A (LF), 0x0D (CR) are allowed
_CONTROL_BYTES = re.compile(rb"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def is_plain_text(path: Union[str, Path]) -> bool:
    """Return True if the file at ``path`` looks like plain text.

    Never raises: missing, unreadable or non-UTF-8 files yield False.
    """
    try:
        data = Path(path).read_bytes()
        data.decode("utf-8")
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        logger.debug("Treating %s as binary: %s", path, exc)
        return False
    return _CONTROL_BYTES.search(data) is None

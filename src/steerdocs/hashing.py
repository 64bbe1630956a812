# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Content hashing used to detect local customisation of installed frameworks."""

from __future__ import annotations

import hashlib
from typing import Final

_BOM: Final[str] = "\ufeff"


def normalise_content(content: str) -> str:
    """Return ``content`` with a leading BOM dropped and line endings folded to ``\\n``."""

    if content.startswith(_BOM):
        content = content[len(_BOM) :]
    return content.replace("\r\n", "\n").replace("\r", "\n")


def compute_content_hash(content: str) -> str:
    """Calculate the hash recorded for a framework document.

    Args:
        content: Document text as written to or read from disk.

    Returns:
        str: Hex-encoded SHA-256 digest of the normalised UTF-8 text.
    """

    hasher = hashlib.sha256()
    hasher.update(normalise_content(content).encode("utf-8"))
    return hasher.hexdigest()


__all__ = ["compute_content_hash", "normalise_content"]

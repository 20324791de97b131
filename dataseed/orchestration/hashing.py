from __future__ import annotations

import hashlib
import re

from ..infra.contracts import ContentHasher

# Unicode-aware \s: besides space, tab, CR and LF this also drops \v, \f and
# Unicode spaces such as U+00A0, matching the .NET regex class.
_WHITESPACE_RE = re.compile(r"\s+")


def strip_whitespace(content: str) -> str:
    return _WHITESPACE_RE.sub("", content or "")


def hash_content(content: str) -> str:
    """SHA-256 of the content with all whitespace removed, as uppercase hex.

    Two definitions that differ only in formatting or indentation hash identically.
    """
    return hashlib.sha256(strip_whitespace(content).encode("utf-8")).hexdigest().upper()


class Sha256ContentHasher(ContentHasher):
    """Default ContentHasher."""

    def hash(self, content: str) -> str:
        return hash_content(content)

    def describe(self) -> dict:
        return {"class": self.__class__.__name__, "algorithm": "sha256", "whitespace": "stripped"}

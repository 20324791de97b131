from __future__ import annotations

from .hashing import Sha256ContentHasher, hash_content
from .loader import load_candidates
from .runner import DataSeedRunner
from .validator import validate_candidates

__all__ = [
    "Sha256ContentHasher",
    "hash_content",
    "load_candidates",
    "DataSeedRunner",
    "validate_candidates",
]

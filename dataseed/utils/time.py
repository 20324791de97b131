from __future__ import annotations

from datetime import datetime, timezone

ISO_Z_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utcnow_iso() -> str:
    """Current UTC time as a second-precision ISO-8601 string with a Z suffix."""
    return datetime.now(timezone.utc).strftime(ISO_Z_FORMAT)

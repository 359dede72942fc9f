"""
Identifier and clock helpers for newly created ReqIF objects.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def new_identifier() -> str:
    """Return a fresh ReqIF identifier (an NCName, hence the leading underscore)."""
    return f"_{uuid.uuid4()}"


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)

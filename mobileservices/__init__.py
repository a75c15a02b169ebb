"""Value types used by the mobile service client."""

from __future__ import annotations

from typing import Mapping, Optional

from .models import AuthenticatedUser, DateOffset, duplicate_user
from .redaction import configure_logging, mask_token


def load_user(environ: Optional[Mapping[str, str]] = None) -> Optional[AuthenticatedUser]:
    """Return the configured user from the environment or a credentials profile."""

    from .config import load_user as _load_user

    return _load_user(environ)


__all__ = [
    "AuthenticatedUser",
    "DateOffset",
    "configure_logging",
    "duplicate_user",
    "load_user",
    "mask_token",
]

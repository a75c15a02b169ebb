"""Value types shared by the mobile service client."""

from __future__ import annotations

import copy as _copy
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from .redaction import mask_token


@dataclass(frozen=True)
class DateOffset:
    """A timestamp that should be sent to the service as a date with offset.

    Query builders wrap a date in this type to distinguish it from a plain
    date supplied by the application. The wrapped value is stored as given.
    """

    date: Optional[datetime]


class AuthenticatedUser:
    """An end user that has logged in to a mobile service.

    ``user_id`` is fixed at construction. ``authentication_token`` can be
    replaced whenever the session is refreshed; while it is set, request
    pipelines attach it to outgoing calls.
    """

    def __init__(self, user_id: str) -> None:
        self._user_id = user_id
        self.authentication_token: Optional[str] = None

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def has_token(self) -> bool:
        return bool(self.authentication_token)

    def copy(self) -> "AuthenticatedUser":
        """Return an independent duplicate carrying the same id and token."""

        duplicate = AuthenticatedUser(self._user_id)
        duplicate.authentication_token = self.authentication_token
        return duplicate

    def __copy__(self) -> "AuthenticatedUser":
        return self.copy()

    def __deepcopy__(self, memo: Dict[int, Any]) -> "AuthenticatedUser":
        duplicate = self.copy()
        memo[id(self)] = duplicate
        return duplicate

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AuthenticatedUser):
            return NotImplemented
        return (
            self._user_id == other._user_id
            and self.authentication_token == other.authentication_token
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"AuthenticatedUser(user_id={self._user_id!r}, "
            f"authentication_token={mask_token(self.authentication_token)})"
        )


def duplicate_user(user: AuthenticatedUser) -> AuthenticatedUser:
    """Module-level alias for :meth:`AuthenticatedUser.copy`."""

    return _copy.copy(user)


__all__ = ["AuthenticatedUser", "DateOffset", "duplicate_user"]

"""Load a previously issued user session from the environment or a profile file."""
from __future__ import annotations

import logging
import os
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from .models import AuthenticatedUser

logger = logging.getLogger("mobileservices.config")

USER_ID_ENV = "MOBILESERVICES_USER_ID"
AUTH_TOKEN_ENV = "MOBILESERVICES_AUTH_TOKEN"
PROFILE_PATH_ENV = "MOBILESERVICES_PROFILE"

_DEFAULT_PROFILE_PATH = Path("~/.mobileservices/profile.yaml")


@dataclass(frozen=True)
class UserProfile:
    """A user id and token as stored in a credentials profile."""

    user_id: str
    authentication_token: Optional[str] = None

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "UserProfile":
        """Create a :class:`UserProfile` from the ``user`` section of a profile."""
        if "userId" not in data or data["userId"] is None:
            raise ValueError("Profile is missing the required 'userId' field")

        token = data.get("authenticationToken")
        return UserProfile(
            user_id=str(data["userId"]),
            authentication_token=str(token) if token is not None else None,
        )

    def to_user(self) -> AuthenticatedUser:
        user = AuthenticatedUser(self.user_id)
        user.authentication_token = self.authentication_token
        return user


def load_user_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[AuthenticatedUser]:
    """Build a user from ``MOBILESERVICES_USER_ID`` and ``MOBILESERVICES_AUTH_TOKEN``."""
    env = os.environ if environ is None else environ
    user_id = env.get(USER_ID_ENV)
    if user_id is None:
        return None

    user = AuthenticatedUser(user_id)
    token = env.get(AUTH_TOKEN_ENV, "").strip()
    user.authentication_token = token or None
    logger.debug("Loaded user %r from environment", user_id)
    return user


def load_user_profile(profile_path: Path) -> AuthenticatedUser:
    """Load a user from a YAML credentials profile."""
    with profile_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    if not isinstance(raw, dict):
        raise ValueError("Profile file must contain a mapping at the top level")

    section = raw.get("user")
    if section is None:
        raise ValueError("Profile file must define the signed-in user under the 'user' key")
    if not isinstance(section, dict):
        raise ValueError("The 'user' entry of a profile file must be a mapping")

    profile = UserProfile.from_dict(section)
    logger.info("Loaded user %r from profile %s", profile.user_id, profile_path)
    return profile.to_user()


def resolve_profile_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the credentials profile."""
    if env_value:
        candidate = Path(env_value)
    else:
        candidate = _DEFAULT_PROFILE_PATH
    return candidate.expanduser().resolve(strict=False)


def load_user(environ: Optional[Mapping[str, str]] = None) -> Optional[AuthenticatedUser]:
    """Return the configured user, preferring the environment over the profile."""
    env: Mapping[str, str] = os.environ if environ is None else environ
    user = load_user_from_env(env)
    if user is not None:
        return user

    profile_path = resolve_profile_path(env.get(PROFILE_PATH_ENV))
    if not profile_path.is_file():
        logger.debug("No credentials profile found at %s", profile_path)
        return None
    return load_user_profile(profile_path)


def save_user_profile(user: AuthenticatedUser, profile_path: Path) -> None:
    """Write ``user`` to a YAML profile readable by :func:`load_user_profile`."""
    payload: Dict[str, Dict[str, Optional[str]]] = {
        "user": {
            "userId": user.user_id,
            "authenticationToken": user.authentication_token,
        }
    }
    profile_path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(profile_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    # The creation mode does not apply to a file that already existed.
    with suppress(OSError):
        os.chmod(profile_path, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        yaml.safe_dump(payload, handle, sort_keys=False)
    logger.info("Saved user %r to profile %s", user.user_id, profile_path)


__all__ = [
    "AUTH_TOKEN_ENV",
    "PROFILE_PATH_ENV",
    "USER_ID_ENV",
    "UserProfile",
    "load_user",
    "load_user_from_env",
    "load_user_profile",
    "save_user_profile",
    "resolve_profile_path",
]

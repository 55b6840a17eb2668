"""Credentials Provider: email/password sign-in against the users table.

Invariants:
    - Unparseable credentials, unknown email, and wrong password are
      indistinguishable to the caller: all raise CredentialsSignin
    - Store or hash failures during sign-in raise AuthError("CallbackRouteError")
    - On success the user id is written to the signed session cookie
    - Post-login redirects only ever target same-site paths
"""

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any
from urllib.parse import urlsplit

import bcrypt
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.core.domain_types import DASHBOARD_PATH, Redirect
from dashboard.core.errors import AuthError, CredentialsSignin
from dashboard.models.user import User
from dashboard.schemas.auth import Credentials

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=rounds),
    ).decode("utf-8")


def _safe_redirect(target: Any) -> str:
    """Same-site path for the post-login redirect; DASHBOARD_PATH otherwise."""
    if not isinstance(target, str):
        return DASHBOARD_PATH
    # browsers read "\" as "/" in URLs, so "/\host" means "//host"
    parts = urlsplit(target.replace("\\", "/"))
    if parts.scheme or parts.netloc or not parts.path.startswith("/"):
        return DASHBOARD_PATH
    return target


class CredentialsProvider:
    """Checks submitted credentials and opens a session for the matching user."""

    id = "credentials"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def authorize(self, form: Mapping[str, Any]) -> User | None:
        """Return the user matching the credentials, or None."""
        try:
            credentials = Credentials.model_validate({
                "email": form.get("email"),
                "password": form.get("password"),
            })
        except ValidationError:
            logger.info("Rejected malformed credentials")
            return None

        try:
            result = await self.db.execute(
                select(User).where(User.email == credentials.email),
            )
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch user: {e}", exc_info=True)
            raise AuthError("CallbackRouteError", "Failed to fetch user")

        if user is None:
            return None
        try:
            matches = bcrypt.checkpw(
                credentials.password.encode("utf-8"), user.password.encode("utf-8"),
            )
        except ValueError as e:
            # stored hash is not a bcrypt hash
            logger.error(f"Unusable password hash for user {user.id}: {e}")
            raise AuthError("CallbackRouteError", "Failed to verify password")
        return user if matches else None

    async def sign_in(
        self, session: MutableMapping[str, Any], form: Mapping[str, Any],
    ) -> Redirect:
        user = await self.authorize(form)
        if user is None:
            raise CredentialsSignin()
        session[SESSION_USER_KEY] = str(user.id)
        logger.info(f"User {user.id} signed in")
        return Redirect(_safe_redirect(form.get("redirect_to")))


def sign_out(session: MutableMapping[str, Any]) -> Redirect:
    session.clear()
    return Redirect("/")

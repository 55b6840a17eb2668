"""Authenticate: delegate sign-in to the credentials provider, map its errors to form text.

Invariants:
    - CredentialsSignin -> "Invalid credentials."
    - any other AuthError -> "Something went wrong."
    - anything else propagates to the framework error handlers
"""

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Protocol

from dashboard.core.domain_types import Redirect
from dashboard.core.errors import AuthError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."
SOMETHING_WENT_WRONG = "Something went wrong."


class SignInProvider(Protocol):
    async def sign_in(
        self, session: MutableMapping[str, Any], form: Mapping[str, Any],
    ) -> Redirect: ...


async def authenticate(
    session: MutableMapping[str, Any],
    provider: SignInProvider,
    form: Mapping[str, Any],
) -> Redirect | str:
    """Sign in with submitted credentials. Returns a redirect or an error message."""
    try:
        return await provider.sign_in(session, form)
    except AuthError as e:
        logger.info(
            f"Sign-in rejected: {e.type}", extra={"auth_error_type": e.type},
        )
        if e.type == "CredentialsSignin":
            return INVALID_CREDENTIALS
        return SOMETHING_WENT_WRONG

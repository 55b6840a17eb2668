"""Request Dependencies: form parsing, session guard, and action-result translation.

Invariants:
    - Dashboard routes require a user id in the signed session cookie
    - Anonymous dashboard requests get 303 -> /login?callback_url=<original path>
    - Redirect results become 303 See Other (POST -> GET)
    - ActionState with field errors -> 400; ActionState without -> 503
"""

from typing import Any
from urllib.parse import quote

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from dashboard.core.domain_types import LOGIN_PATH, Redirect
from dashboard.infrastructure.credentials_provider import SESSION_USER_KEY
from dashboard.schemas.invoice import ActionState


async def form_fields(request: Request) -> dict[str, Any]:
    """Submitted form as plain text fields; file parts are dropped."""
    form = await request.form()
    return {k: v for k, v in form.items() if isinstance(v, str)}


async def require_user(request: Request) -> str:
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        raise HTTPException(
            status.HTTP_303_SEE_OTHER,
            detail="Authentication required",
            headers={"Location": f"{LOGIN_PATH}?callback_url={quote(target, safe='')}"},
        )
    return user_id


def to_response(result: ActionState | Redirect) -> Response:
    if isinstance(result, Redirect):
        return RedirectResponse(result.location, status.HTTP_303_SEE_OTHER)
    code = (
        status.HTTP_400_BAD_REQUEST if result.errors
        else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    return JSONResponse(status_code=code, content=result.model_dump())

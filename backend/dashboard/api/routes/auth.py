"""Auth Routes: credential sign-in and sign-out.

Invariants:
    - Successful sign-in -> 303 to the (same-site) redirect target, session cookie set
    - Rejected sign-in -> 401 {"error_message": ...}
    - Sign-out clears the session and redirects to /
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.api.dependencies import form_fields
from dashboard.infrastructure.credentials_provider import CredentialsProvider, sign_out
from dashboard.infrastructure.database import get_db
from dashboard.services.authenticate import authenticate

router = APIRouter(tags=["auth"])


@router.post("/login")
async def login(
    request: Request,
    fields: dict = Depends(form_fields),
    db: AsyncSession = Depends(get_db),
):
    result = await authenticate(request.session, CredentialsProvider(db), fields)
    if isinstance(result, str):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error_message": result},
        )
    return RedirectResponse(result.location, status.HTTP_303_SEE_OTHER)


@router.post("/logout")
async def logout(request: Request):
    redirect = sign_out(request.session)
    return RedirectResponse(redirect.location, status.HTTP_303_SEE_OTHER)

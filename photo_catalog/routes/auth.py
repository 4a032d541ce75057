"""Authentication routes."""
from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from ..config import SESSION_COOKIE, SESSION_MAX_AGE
from ..dependencies import get_access_service, get_sessions, require_user

router = APIRouter(tags=["auth"])


class LoginInput(BaseModel):
    username: str
    password: str


@router.post("/login")
async def login(data: LoginInput, request: Request, response: Response):
    """Log in and set the session cookie."""
    result = await get_access_service(request).authenticate(data.username, data.password)

    if not result.success:
        raise HTTPException(status_code=401, detail=result.message)

    session_id = get_sessions(request).create(result.user)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session_id,
        httponly=True,
        samesite="lax",
        max_age=SESSION_MAX_AGE
    )
    return {"status": "ok", "user": result.user.to_dict()}


@router.post("/logout")
def logout(request: Request, response: Response):
    """Logout user."""
    session_id = request.cookies.get(SESSION_COOKIE)
    if session_id:
        get_sessions(request).delete(session_id)

    response.delete_cookie(SESSION_COOKIE)
    return {"status": "ok"}


@router.get("/api/me")
def current_user(request: Request):
    """Get the logged-in user."""
    return require_user(request).to_dict()

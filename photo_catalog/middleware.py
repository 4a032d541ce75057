"""Application middleware."""
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .config import PUBLIC_PATHS, SESSION_COOKIE


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware to check authentication on all routes."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        # Allow public paths
        if path in PUBLIC_PATHS:
            return await call_next(request)

        # Check session cookie
        session_id = request.cookies.get(SESSION_COOKIE)
        if session_id:
            user = request.app.state.sessions.get_valid(session_id)
            if user:
                # Valid session - attach user to request state
                request.state.user = user
                return await call_next(request)

        return JSONResponse(status_code=401, content={"detail": "Not authenticated"})

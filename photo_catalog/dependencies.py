"""Shared FastAPI dependencies."""
from fastapi import Request, HTTPException

from .application.services import AccessService, CatalogService
from .domain.models import AuthenticatedUser, CatalogResult, ErrorKind
from .infrastructure.sessions import SessionStore

# HTTP status for each expected failure outcome
ERROR_STATUS = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.STORAGE_CONFLICT: 409,
}


def get_current_user(request: Request) -> AuthenticatedUser | None:
    """Get current user from request state."""
    return getattr(request.state, "user", None)


def require_user(request: Request) -> AuthenticatedUser:
    """Require authenticated user, raise 401 if not authenticated."""
    user = get_current_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def get_catalog_service(request: Request) -> CatalogService:
    """Get the catalog service built at startup."""
    return request.app.state.catalog_service


def get_access_service(request: Request) -> AccessService:
    """Get the access service built at startup."""
    return request.app.state.access_service


def get_sessions(request: Request) -> SessionStore:
    """Get the session registry."""
    return request.app.state.sessions


def raise_for_result(result: CatalogResult) -> CatalogResult:
    """Turn a failed catalog result into an HTTPException.

    Returns the result unchanged when it succeeded.
    """
    if not result.success:
        raise HTTPException(status_code=ERROR_STATUS.get(result.error, 400), detail=result.message)
    return result

"""Session cookie lifecycle routes."""

from fastapi import APIRouter, Depends, Response

from bookshare.api.deps import get_settings
from bookshare.api.schemas import SessionRequest, SessionResponse
from bookshare.config import Settings

router = APIRouter(prefix="/api/auth", tags=["Session"])


@router.post("/session", response_model=SessionResponse)
async def create_session(
    data: SessionRequest,
    response: Response,
    cfg: Settings = Depends(get_settings),
) -> SessionResponse:
    """Store the client's auth token in an HTTP-only session cookie."""
    response.set_cookie(
        cfg.session_cookie_name,
        data.token,
        max_age=cfg.session_max_age_seconds,
        path="/",
        secure=cfg.secure_cookies,
        httponly=True,
        samesite="strict",
    )
    return SessionResponse(success=True)


@router.delete("/session", response_model=SessionResponse)
async def delete_session(
    response: Response,
    cfg: Settings = Depends(get_settings),
) -> SessionResponse:
    """Clear the session cookie."""
    response.delete_cookie(cfg.session_cookie_name, path="/")
    return SessionResponse(success=True)

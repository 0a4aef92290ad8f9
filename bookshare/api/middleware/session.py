"""Session cookie gate for page routes."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from bookshare.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionConfig:
    """Cookie name and route lists the gate works from."""

    cookie_name: str
    protected_prefixes: tuple[str, ...] = field(default_factory=tuple)
    auth_routes: tuple[str, ...] = field(default_factory=tuple)
    login_path: str = "/login"
    home_path: str = "/home"

    @classmethod
    def from_settings(cls, cfg: Settings) -> "SessionConfig":
        return cls(
            cookie_name=cfg.session_cookie_name,
            protected_prefixes=tuple(cfg.protected_route_prefixes),
            auth_routes=tuple(cfg.auth_routes),
            login_path=cfg.login_path,
            home_path=cfg.home_path,
        )

    def is_protected(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.protected_prefixes)

    def is_auth_route(self, path: str) -> bool:
        return path in self.auth_routes


class SessionGateMiddleware(BaseHTTPMiddleware):
    """
    Redirect page requests based on the presence of the session cookie.

    Cookie presence alone is trusted: there is no token verification,
    expiry check or refresh. Protected prefixes without a cookie go to the
    login page (and the cookie is cleared); auth pages with a cookie go home.
    """

    def __init__(self, app: ASGIApp, config: SessionConfig) -> None:
        super().__init__(app)
        self.config = config

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        path = request.url.path
        has_session = bool(request.cookies.get(self.config.cookie_name))

        if self.config.is_protected(path) and not has_session:
            logger.info("No session for %s, redirecting to %s", path, self.config.login_path)
            response = RedirectResponse(self.config.login_path)
            response.delete_cookie(self.config.cookie_name, path="/")
            return response

        if self.config.is_auth_route(path) and has_session:
            return RedirectResponse(self.config.home_path)

        return await call_next(request)

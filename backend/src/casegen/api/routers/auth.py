"""GitHub OAuth login endpoints."""

import logging

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import RedirectResponse

from casegen.api.deps import get_session_id, get_session_store, get_settings
from casegen.api.errors import UnauthorizedError, UpstreamFailure
from casegen.config import Settings
from casegen.github.errors import GitHubError
from casegen.github.oauth import build_authorize_url, exchange_code_for_token
from casegen.sessions.store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _callback_url(request: Request, settings: Settings) -> str:
    if settings.backend_url:
        return f"{settings.backend_url.rstrip('/')}/auth/github/callback"
    return str(request.url_for("github_callback"))


@router.get("/github")
async def github_login(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> dict[str, str]:
    """Return the GitHub authorization URL to send the browser to."""
    try:
        auth_url = build_authorize_url(settings, _callback_url(request, settings))
    except GitHubError as e:
        logger.error(f"Cannot start GitHub login: {e}")
        raise UpstreamFailure("GitHub OAuth is not configured") from e
    return {"authUrl": auth_url}


@router.get("/github/callback", name="github_callback")
async def github_callback(
    code: str | None = Query(None),
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
) -> RedirectResponse:
    """Exchange the OAuth code and hand the browser a session id."""
    if not code:
        logger.warning("GitHub callback without an authorization code")
        return RedirectResponse(f"{settings.frontend_url}/?error=auth_failed", status_code=302)

    try:
        token = await exchange_code_for_token(settings, code)
    except GitHubError:
        logger.exception("GitHub OAuth code exchange failed")
        return RedirectResponse(f"{settings.frontend_url}/?error=auth_failed", status_code=302)

    session = store.create(token)
    logger.info(f"Created session ({len(store)} active)")
    return RedirectResponse(f"{settings.frontend_url}/dashboard?session={session.id}", status_code=302)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> Response:
    """Forget the caller's session."""
    if not store.remove(session_id):
        raise UnauthorizedError()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

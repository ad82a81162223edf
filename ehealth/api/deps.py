from fastapi import Depends, Request
from typing import Optional

from ..core.security import LoginRequired, unsign_session_id
from ..core.sessions import SessionStore

def get_session_store(request: Request) -> SessionStore:
    """Get the application's session store."""
    return request.app.state.session_store

def get_session_id(request: Request) -> Optional[str]:
    """Read the session id from the signed session cookie, if any."""
    settings = request.app.state.settings
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    return unsign_session_id(token, settings.SESSION_SECRET)

def get_optional_user_id(
    session_id: Optional[str] = Depends(get_session_id),
    session_store: SessionStore = Depends(get_session_store)
) -> Optional[int]:
    """Get the logged-in user's id, or None for anonymous requests."""
    if not session_id:
        return None
    return session_store.get_user_id(session_id)

def require_user_id(
    request: Request,
    user_id: Optional[int] = Depends(get_optional_user_id)
) -> int:
    """Guard for protected routes; anonymous requests are sent to /login."""
    if user_id is None:
        raise LoginRequired(request.url.path)
    return user_id

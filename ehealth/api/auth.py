from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..core.database import get_db
from ..core.security import PasswordHashingError, sign_session_id
from ..core.sessions import SessionStore
from .deps import get_session_id, get_session_store
from ..services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])

REGISTRATION_ERROR = "Error registering user. Maybe email already exists."

@router.post("/register")
def register(
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db)
):
    """Register a new user, then send them to the login page."""
    auth_service = AuthService(db)
    try:
        auth_service.register_user(name, email, password)
    except PasswordHashingError as e:
        logger.error(f"Registration failed while hashing password: {e.__cause__!r}")
        return PlainTextResponse("Server error.", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except IntegrityError as e:
        logger.error(f"Registration rejected by database constraint: {e.orig}")
        return PlainTextResponse(REGISTRATION_ERROR, status_code=status.HTTP_400_BAD_REQUEST)
    except SQLAlchemyError as e:
        logger.error(f"Registration failed: {str(e)}")
        return PlainTextResponse(REGISTRATION_ERROR, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return RedirectResponse("/login", status_code=status.HTTP_302_FOUND)

@router.post("/login")
def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
    session_store: SessionStore = Depends(get_session_store),
    current_session_id: Optional[str] = Depends(get_session_id)
):
    """Check credentials and start a session."""
    settings = request.app.state.settings
    auth_service = AuthService(db)
    try:
        user_id = auth_service.authenticate_user(email, password)
    except SQLAlchemyError as e:
        logger.error(f"Login failed: {str(e)}")
        return PlainTextResponse("Server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if user_id is None:
        return PlainTextResponse(
            "Invalid email or password",
            status_code=status.HTTP_401_UNAUTHORIZED
        )

    # Never carry a pre-login session id over into the authenticated state
    if current_session_id:
        session_store.destroy(current_session_id)
    session_id = session_store.create(user_id)

    response = RedirectResponse("/book", status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        sign_session_id(session_id, settings.SESSION_SECRET, settings.SESSION_TTL_SECONDS),
        max_age=settings.SESSION_TTL_SECONDS,
        httponly=True,
        samesite="lax",
    )
    return response

@router.get("/logout")
def logout(
    request: Request,
    session_store: SessionStore = Depends(get_session_store),
    session_id: Optional[str] = Depends(get_session_id)
):
    """Destroy the current session and return to the home page."""
    if session_id:
        session_store.destroy(session_id)

    response = RedirectResponse("/", status_code=status.HTTP_302_FOUND)
    response.delete_cookie(request.app.state.settings.SESSION_COOKIE_NAME)
    return response

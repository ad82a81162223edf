from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
import logging

logger = logging.getLogger(__name__)

# Password hashing, bcrypt work factor 10
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)

SESSION_COOKIE_ALGORITHM = "HS256"

class PasswordHashingError(Exception):
    """Raised when the password hasher itself fails (not on a mismatch)."""

class LoginRequired(Exception):
    """Raised by the auth guard when a protected route has no valid session."""

    def __init__(self, path: str = ""):
        super().__init__(path)
        self.path = path

# Password utilities
def get_password_hash(password: str) -> str:
    """Generate a salted bcrypt hash."""
    try:
        return pwd_context.hash(password)
    except Exception as exc:
        raise PasswordHashingError("Password hashing failed") from exc

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against its hash.

    A mismatch is ``False``; so is a stored value that is not a bcrypt hash.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Stored password hash is not in a recognized format")
        return False

# Session cookie utilities
def sign_session_id(session_id: str, secret: str, max_age: int) -> str:
    """Wrap a session id in a signed token suitable for a cookie value."""
    expire = datetime.utcnow() + timedelta(seconds=max_age)
    return jwt.encode(
        {"sid": session_id, "exp": expire},
        secret,
        algorithm=SESSION_COOKIE_ALGORITHM,
    )

def unsign_session_id(token: str, secret: str) -> Optional[str]:
    """Return the session id from a cookie value, or None if it was tampered with or expired."""
    try:
        payload = jwt.decode(token, secret, algorithms=[SESSION_COOKIE_ALGORITHM])
    except JWTError:
        return None

    session_id = payload.get("sid")
    return session_id if isinstance(session_id, str) else None

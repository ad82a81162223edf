from sqlalchemy.orm import Session
from typing import Optional
import logging

from .gateway import PersistenceGateway
from ..core.security import verify_password, get_password_hash

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: Session):
        self.gateway = PersistenceGateway(db)

    def register_user(self, name: str, email: str, password: str) -> int:
        """Register a new user and return its id.

        Raises PasswordHashingError if hashing fails and IntegrityError if the
        email is already registered.
        """
        hashed_password = get_password_hash(password)
        user_id = self.gateway.create_user(name, email, hashed_password)
        logger.info(f"Registered user {user_id}")
        return user_id

    def authenticate_user(self, email: str, password: str) -> Optional[int]:
        """Return the user id when the credentials match, None otherwise."""
        user = self.gateway.find_user_by_email(email)
        if not user:
            logger.info("Login rejected: unknown email")
            return None

        if not verify_password(password, user.password_hash):
            logger.info(f"Login rejected: wrong password for user {user.id}")
            return None

        return user.id

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime
from typing import List, Optional
import logging

from ..models.user import User
from ..models.doctor import Doctor
from ..models.appointment import Appointment

logger = logging.getLogger(__name__)

class PersistenceGateway:
    """Parameterized queries for users, doctors and appointments.

    Every write is a single statement committed on its own; on failure the
    session is rolled back and the SQLAlchemy error propagates to the caller.
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def create_user(self, name: str, email: str, password_hash: str) -> int:
        """Insert a user. Raises IntegrityError if the email is taken."""
        user = User(name=name, email=email, password_hash=password_hash)
        self.db.add(user)
        self._commit()
        return user.id

    def find_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create_appointment(self, user_id: int, doctor_id: int, appointment_time: datetime) -> int:
        appointment = Appointment(
            user_id=user_id,
            doctor_id=doctor_id,
            appointment_time=appointment_time,
        )
        self.db.add(appointment)
        self._commit()
        return appointment.id

    def list_appointments_for_user(self, user_id: int) -> List:
        """Return the user's appointments joined with doctor info, newest first."""
        return (
            self.db.query(
                Appointment.id,
                Doctor.name.label("doctor_name"),
                Doctor.specialty,
                Appointment.appointment_time,
                Appointment.status,
            )
            .join(Doctor, Appointment.doctor_id == Doctor.id)
            .filter(Appointment.user_id == user_id)
            .order_by(Appointment.appointment_time.desc(), Appointment.id.desc())
            .all()
        )

    def cancel_appointment(self, appointment_id: int, user_id: int) -> int:
        """Delete an appointment only if it belongs to ``user_id``.

        Returns the number of rows deleted (0 or 1).
        """
        deleted = (
            self.db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self._commit()
        return deleted

    def list_doctors(self) -> List[Doctor]:
        return self.db.query(Doctor).order_by(Doctor.id).all()

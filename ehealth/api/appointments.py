from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from typing import List
import logging

from ..core.database import get_db
from .deps import require_user_id
from ..schemas.appointment import AppointmentResponse, DoctorResponse
from ..services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Appointments"])

BOOKING_ERROR = "Error booking appointment."
CANCEL_ERROR = "Error cancelling appointment."

def _db_error() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "DB error"}
    )

@router.post("/book")
def book_appointment(
    doctor_id: int = Form(...),
    appointment_time: str = Form(...),
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db)
):
    """Book an appointment for the logged-in user."""
    try:
        scheduled_for = datetime.fromisoformat(appointment_time)
    except ValueError:
        logger.info(f"Booking rejected: unparsable time {appointment_time!r}")
        return PlainTextResponse(BOOKING_ERROR, status_code=status.HTTP_400_BAD_REQUEST)

    # The column is naive; store offset-aware times as UTC
    if scheduled_for.tzinfo is not None:
        scheduled_for = scheduled_for.astimezone(timezone.utc).replace(tzinfo=None)

    try:
        appointment_id = PersistenceGateway(db).create_appointment(user_id, doctor_id, scheduled_for)
    except SQLAlchemyError as e:
        logger.error(f"Booking failed: {str(e)}")
        return PlainTextResponse(BOOKING_ERROR, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"User {user_id} booked appointment {appointment_id} with doctor {doctor_id}")
    return RedirectResponse("/manage", status_code=status.HTTP_302_FOUND)

@router.get("/api/appointments", response_model=List[AppointmentResponse])
def list_appointments(
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db)
):
    """List the logged-in user's appointments, newest first."""
    try:
        rows = PersistenceGateway(db).list_appointments_for_user(user_id)
    except SQLAlchemyError as e:
        logger.error(f"Listing appointments failed: {str(e)}")
        return _db_error()

    return [AppointmentResponse.model_validate(row) for row in rows]

@router.post("/manage/cancel")
def cancel_appointment(
    appointment_id: int = Form(...),
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db)
):
    """Cancel one of the logged-in user's appointments."""
    try:
        deleted = PersistenceGateway(db).cancel_appointment(appointment_id, user_id)
    except SQLAlchemyError as e:
        logger.error(f"Cancelling appointment failed: {str(e)}")
        return PlainTextResponse(CANCEL_ERROR, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not deleted:
        # Missing and not-owned look the same to the caller
        logger.warning(f"User {user_id} cancelled appointment {appointment_id}: no matching row")

    return RedirectResponse("/manage", status_code=status.HTTP_302_FOUND)

@router.get("/api/doctors", response_model=List[DoctorResponse])
def list_doctors(db: Session = Depends(get_db)):
    """List all doctors."""
    try:
        doctors = PersistenceGateway(db).list_doctors()
    except SQLAlchemyError as e:
        logger.error(f"Listing doctors failed: {str(e)}")
        return _db_error()

    return [DoctorResponse.model_validate(doctor) for doctor in doctors]

from pydantic import BaseModel, ConfigDict
from datetime import datetime

from ..models.appointment import AppointmentStatus

class DoctorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    specialty: str

class AppointmentResponse(BaseModel):
    """One of the current user's appointments, joined with its doctor."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    doctor_name: str
    specialty: str
    appointment_time: datetime
    status: AppointmentStatus

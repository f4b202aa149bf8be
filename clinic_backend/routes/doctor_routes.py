import logging
from datetime import time
from decimal import Decimal

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.auth.dependencies import ClinicContext, get_clinic_context
from clinic_backend.core.errors import DatabaseUnavailableError, NotFoundError
from clinic_backend.database import get_db
from clinic_backend.models.doctor import Doctor
from clinic_backend.scheduling.availability import describe_availability
from clinic_backend.scheduling.pricing import from_cents, to_cents

router = APIRouter(tags=['doctors'])

logger = logging.getLogger(__name__)


class UpsertDoctorRequest(BaseModel):
    id: int | None = None
    name: str
    speciality: str
    avatar_image_url: str | None = None
    appointment_price: Decimal = Field(gt=0, decimal_places=2)
    available_from_weekday: int = Field(ge=0, le=6)
    available_to_weekday: int = Field(ge=0, le=6)
    available_from_time: time
    available_to_time: time

    @field_validator('name', 'speciality')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('This field is required.')
        return normalized

    @field_validator('avatar_image_url')
    @classmethod
    def validate_avatar_image_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode='after')
    def validate_time_window(self):
        if self.available_from_time >= self.available_to_time:
            raise ValueError('Start time must be earlier than end time.')
        return self


class DoctorAvailabilityResponse(BaseModel):
    from_weekday: str
    to_weekday: str
    from_time: str
    to_time: str


class DoctorResponse(BaseModel):
    id: int
    name: str
    speciality: str
    avatar_image_url: str | None = None
    appointment_price_in_cents: int
    appointment_price: Decimal
    available_from_weekday: int
    available_to_weekday: int
    available_from_time: time
    available_to_time: time
    availability: DoctorAvailabilityResponse


def to_doctor_response(doctor: Doctor) -> DoctorResponse:
    return DoctorResponse(
        id=doctor.id,
        name=doctor.name,
        speciality=doctor.speciality,
        avatar_image_url=doctor.avatar_image_url,
        appointment_price_in_cents=doctor.appointment_price_in_cents,
        appointment_price=from_cents(doctor.appointment_price_in_cents),
        available_from_weekday=doctor.available_from_weekday,
        available_to_weekday=doctor.available_to_weekday,
        available_from_time=doctor.available_from_time,
        available_to_time=doctor.available_to_time,
        availability=DoctorAvailabilityResponse(**describe_availability(doctor)),
    )


def get_clinic_doctor(doctor_id: int, clinic_id: int, db: Session) -> Doctor:
    doctor = db.query(Doctor).filter(Doctor.id == doctor_id).first()
    if doctor is None or doctor.clinic_id != clinic_id:
        raise NotFoundError('Doctor not found.')
    return doctor


@router.post('', response_model=DoctorResponse)
def upsert_doctor(
    data: UpsertDoctorRequest,
    context: ClinicContext = Depends(get_clinic_context),
    db: Session = Depends(get_db),
):
    try:
        if data.id is not None:
            doctor = get_clinic_doctor(data.id, context.clinic_id, db)
        else:
            doctor = Doctor(clinic_id=context.clinic_id)
            db.add(doctor)

        doctor.name = data.name
        doctor.speciality = data.speciality
        doctor.avatar_image_url = data.avatar_image_url
        doctor.appointment_price_in_cents = to_cents(data.appointment_price)
        doctor.available_from_weekday = data.available_from_weekday
        doctor.available_to_weekday = data.available_to_weekday
        doctor.available_from_time = data.available_from_time
        doctor.available_to_time = data.available_to_time

        db.commit()
        db.refresh(doctor)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to save doctor for clinic %s', context.clinic_id)
        raise DatabaseUnavailableError() from exc

    logger.info('Saved doctor %s for clinic %s', doctor.id, context.clinic_id)
    return to_doctor_response(doctor)


@router.get('', response_model=list[DoctorResponse])
def list_doctors(
    context: ClinicContext = Depends(get_clinic_context),
    db: Session = Depends(get_db),
):
    try:
        doctors = db.query(Doctor).filter(
            Doctor.clinic_id == context.clinic_id,
        ).order_by(Doctor.name.desc()).all()
    except SQLAlchemyError as exc:
        logger.exception('Failed to list doctors for clinic %s', context.clinic_id)
        raise DatabaseUnavailableError() from exc

    return [to_doctor_response(doctor) for doctor in doctors]


@router.delete('/{doctor_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_doctor(
    doctor_id: int,
    context: ClinicContext = Depends(get_clinic_context),
    db: Session = Depends(get_db),
):
    try:
        doctor = get_clinic_doctor(doctor_id, context.clinic_id, db)
        db.delete(doctor)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to delete doctor %s', doctor_id)
        raise DatabaseUnavailableError() from exc

    logger.info('Deleted doctor %s from clinic %s', doctor_id, context.clinic_id)

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.auth.dependencies import ClinicContext, get_subscribed_clinic_context
from clinic_backend.core import config
from clinic_backend.core.errors import (
    BookingValidationError,
    DatabaseUnavailableError,
    NotFoundError,
    SlotUnavailableError,
)
from clinic_backend.database import get_db
from clinic_backend.models.appointment import Appointment
from clinic_backend.models.doctor import Doctor
from clinic_backend.routes.doctor_routes import get_clinic_doctor
from clinic_backend.routes.patient_routes import get_clinic_patient
from clinic_backend.scheduling.availability import (
    find_slot,
    generate_time_slots,
    is_date_available,
)
from clinic_backend.scheduling.pricing import from_cents, to_cents

router = APIRouter(tags=['appointments'])

logger = logging.getLogger(__name__)


class UpsertAppointmentRequest(BaseModel):
    id: int | None = None
    patient_id: int
    doctor_id: int
    date: date
    time: time
    appointment_price: Annotated[Decimal, Field(gt=0, decimal_places=2)] | None = None

    @field_validator('time')
    @classmethod
    def validate_time(cls, value):
        # Appointments are stored as naive clinic-local datetimes.
        if value.tzinfo is not None:
            raise ValueError('Time must not include a timezone offset.')
        return value.replace(microsecond=0)


class TimeSlotResponse(BaseModel):
    value: str
    label: str
    available: bool


class AppointmentResponse(BaseModel):
    id: int
    doctor_id: int
    doctor_name: str
    patient_id: int
    patient_name: str
    date: datetime
    appointment_price_in_cents: int
    appointment_price: Decimal


def to_appointment_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.id,
        doctor_id=appointment.doctor_id,
        doctor_name=appointment.doctor.name,
        patient_id=appointment.patient_id,
        patient_name=appointment.patient.name,
        date=appointment.date,
        appointment_price_in_cents=appointment.appointment_price_in_cents,
        appointment_price=from_cents(appointment.appointment_price_in_cents),
    )


def get_clinic_appointment(appointment_id: int, clinic_id: int, db: Session) -> Appointment:
    appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    if appointment is None or appointment.clinic_id != clinic_id:
        raise NotFoundError('Appointment not found.')
    return appointment


def get_booked_times(
    doctor_id: int,
    day: date,
    db: Session,
    exclude_appointment_id: int | None = None,
) -> list[datetime]:
    day_start = datetime.combine(day, time.min)
    query = db.query(Appointment.date).filter(
        Appointment.doctor_id == doctor_id,
        Appointment.date >= day_start,
        Appointment.date < day_start + timedelta(days=1),
    )
    if exclude_appointment_id is not None:
        query = query.filter(Appointment.id != exclude_appointment_id)

    return [booked_at for (booked_at,) in query.all()]


def compute_time_slots(
    doctor: Doctor,
    day: date,
    db: Session,
    exclude_appointment_id: int | None = None,
) -> list[dict]:
    if not is_date_available(doctor, day):
        return []

    booked_times = get_booked_times(doctor.id, day, db, exclude_appointment_id)
    return generate_time_slots(doctor, day, booked_times, config.SLOT_INTERVAL_MINUTES)


@router.get('/available-times', response_model=list[TimeSlotResponse])
def get_available_times(
    doctor_id: int = Query(...),
    date: date = Query(...),
    appointment_id: int | None = Query(default=None),
    context: ClinicContext = Depends(get_subscribed_clinic_context),
    db: Session = Depends(get_db),
):
    try:
        doctor = get_clinic_doctor(doctor_id, context.clinic_id, db)
        if appointment_id is not None:
            appointment = get_clinic_appointment(appointment_id, context.clinic_id, db)
            if appointment.doctor_id != doctor.id:
                raise NotFoundError('Appointment not found.')

        return compute_time_slots(doctor, date, db, exclude_appointment_id=appointment_id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to compute available times for doctor %s', doctor_id)
        raise DatabaseUnavailableError() from exc


@router.post('', response_model=AppointmentResponse)
def upsert_appointment(
    data: UpsertAppointmentRequest,
    context: ClinicContext = Depends(get_subscribed_clinic_context),
    db: Session = Depends(get_db),
):
    try:
        doctor = get_clinic_doctor(data.doctor_id, context.clinic_id, db)
        patient = get_clinic_patient(data.patient_id, context.clinic_id, db)

        if data.id is not None:
            appointment = get_clinic_appointment(data.id, context.clinic_id, db)
        else:
            appointment = None

        if not is_date_available(doctor, data.date):
            raise BookingValidationError('The doctor is not available on this date.')

        # Re-check against the stored bookings; the client's slot list may be stale.
        slots = compute_time_slots(doctor, data.date, db, exclude_appointment_id=data.id)
        slot = find_slot(slots, data.time)
        if slot is None:
            raise BookingValidationError("The selected time is outside the doctor's availability.")
        if not slot['available']:
            logger.warning(
                'Slot %s %s already booked for doctor %s',
                data.date, slot['value'], doctor.id,
            )
            raise SlotUnavailableError('This time is no longer available.')

        if data.appointment_price is not None:
            price_in_cents = to_cents(data.appointment_price)
        else:
            price_in_cents = doctor.appointment_price_in_cents

        if appointment is None:
            appointment = Appointment(clinic_id=context.clinic_id)
            db.add(appointment)

        appointment.doctor_id = doctor.id
        appointment.patient_id = patient.id
        appointment.date = datetime.combine(data.date, data.time)
        appointment.appointment_price_in_cents = price_in_cents

        db.commit()
        db.refresh(appointment)
    except IntegrityError as exc:
        db.rollback()
        logger.warning('Concurrent booking rejected for doctor %s at %s %s', data.doctor_id, data.date, data.time)
        raise SlotUnavailableError('This time is no longer available.') from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to save appointment for clinic %s', context.clinic_id)
        raise DatabaseUnavailableError() from exc

    logger.info(
        '%s appointment %s for clinic %s',
        'Updated' if data.id is not None else 'Created',
        appointment.id,
        context.clinic_id,
    )
    return to_appointment_response(appointment)


@router.get('', response_model=list[AppointmentResponse])
def list_appointments(
    context: ClinicContext = Depends(get_subscribed_clinic_context),
    db: Session = Depends(get_db),
):
    try:
        appointments = db.query(Appointment).filter(
            Appointment.clinic_id == context.clinic_id,
        ).order_by(Appointment.date.desc()).all()

        return [to_appointment_response(appointment) for appointment in appointments]
    except SQLAlchemyError as exc:
        logger.exception('Failed to list appointments for clinic %s', context.clinic_id)
        raise DatabaseUnavailableError() from exc


@router.delete('/{appointment_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(
    appointment_id: int,
    context: ClinicContext = Depends(get_subscribed_clinic_context),
    db: Session = Depends(get_db),
):
    try:
        appointment = get_clinic_appointment(appointment_id, context.clinic_id, db)
        db.delete(appointment)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to delete appointment %s', appointment_id)
        raise DatabaseUnavailableError() from exc

    logger.info('Deleted appointment %s from clinic %s', appointment_id, context.clinic_id)

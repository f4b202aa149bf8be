import logging
import re
from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.auth.dependencies import ClinicContext, get_clinic_context
from clinic_backend.core.errors import DatabaseUnavailableError, NotFoundError
from clinic_backend.database import get_db
from clinic_backend.models.patient import Patient

router = APIRouter(tags=['patients'])

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15


class UpsertPatientRequest(BaseModel):
    id: int | None = None
    name: str
    email: str
    phone_number: str
    sex: Literal['male', 'female']

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Patient name is required.')
        return normalized

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not EMAIL_PATTERN.match(normalized):
            raise ValueError('Invalid email address.')
        return normalized

    @field_validator('phone_number')
    @classmethod
    def validate_phone_number(cls, value: str) -> str:
        digits = re.sub(r'\D', '', value)
        if not MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS:
            raise ValueError('Phone number must have between 10 and 15 digits.')
        return digits

    @field_validator('sex', mode='before')
    @classmethod
    def normalize_sex(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class PatientResponse(BaseModel):
    id: int
    name: str
    email: str
    phone_number: str
    sex: str
    created_at: datetime

    class Config:
        from_attributes = True


def get_clinic_patient(patient_id: int, clinic_id: int, db: Session) -> Patient:
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if patient is None or patient.clinic_id != clinic_id:
        raise NotFoundError('Patient not found.')
    return patient


@router.post('', response_model=PatientResponse)
def upsert_patient(
    data: UpsertPatientRequest,
    context: ClinicContext = Depends(get_clinic_context),
    db: Session = Depends(get_db),
):
    try:
        if data.id is not None:
            patient = get_clinic_patient(data.id, context.clinic_id, db)
        else:
            patient = Patient(clinic_id=context.clinic_id)
            db.add(patient)

        patient.name = data.name
        patient.email = data.email
        patient.phone_number = data.phone_number
        patient.sex = data.sex

        db.commit()
        db.refresh(patient)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to save patient for clinic %s', context.clinic_id)
        raise DatabaseUnavailableError() from exc

    logger.info('Saved patient %s for clinic %s', patient.id, context.clinic_id)
    return patient


@router.get('', response_model=list[PatientResponse])
def list_patients(
    context: ClinicContext = Depends(get_clinic_context),
    db: Session = Depends(get_db),
):
    try:
        return db.query(Patient).filter(
            Patient.clinic_id == context.clinic_id,
        ).order_by(Patient.name.desc()).all()
    except SQLAlchemyError as exc:
        logger.exception('Failed to list patients for clinic %s', context.clinic_id)
        raise DatabaseUnavailableError() from exc


@router.delete('/{patient_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_patient(
    patient_id: int,
    context: ClinicContext = Depends(get_clinic_context),
    db: Session = Depends(get_db),
):
    try:
        patient = get_clinic_patient(patient_id, context.clinic_id, db)
        db.delete(patient)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to delete patient %s', patient_id)
        raise DatabaseUnavailableError() from exc

    logger.info('Deleted patient %s from clinic %s', patient_id, context.clinic_id)

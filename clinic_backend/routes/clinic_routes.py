import logging
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.auth.dependencies import get_current_user
from clinic_backend.core.errors import DatabaseUnavailableError
from clinic_backend.database import get_db
from clinic_backend.models.clinic import Clinic, UserClinic
from clinic_backend.models.user import User

router = APIRouter(tags=['clinics'])

logger = logging.getLogger(__name__)

MAX_CLINIC_NAME_LENGTH = 120


class CreateClinicRequest(BaseModel):
    name: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Clinic name is required.')
        if len(normalized) > MAX_CLINIC_NAME_LENGTH:
            raise ValueError(f'Clinic name must be {MAX_CLINIC_NAME_LENGTH} characters or fewer.')
        return normalized


class ClinicResponse(BaseModel):
    id: int
    name: str
    created_at: datetime

    class Config:
        from_attributes = True


@router.post('', response_model=ClinicResponse, status_code=status.HTTP_201_CREATED)
def create_clinic(
    data: CreateClinicRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        clinic = Clinic(name=data.name)
        db.add(clinic)
        db.flush()

        db.add(UserClinic(user_id=current_user.id, clinic_id=clinic.id))
        db.commit()
        db.refresh(clinic)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to create clinic for user %s', current_user.id)
        raise DatabaseUnavailableError() from exc

    logger.info('Created clinic %s for user %s', clinic.id, current_user.id)
    return clinic


@router.get('', response_model=list[ClinicResponse])
def list_my_clinics(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return db.query(Clinic).join(UserClinic, UserClinic.clinic_id == Clinic.id).filter(
            UserClinic.user_id == current_user.id,
        ).order_by(Clinic.name.asc()).all()
    except SQLAlchemyError as exc:
        logger.exception('Failed to list clinics for user %s', current_user.id)
        raise DatabaseUnavailableError() from exc

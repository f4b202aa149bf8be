import logging
from dataclasses import dataclass

import jwt
from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from clinic_backend.auth import jwt_handler
from clinic_backend.core.errors import SubscriptionRequiredError, UnauthorizedError
from clinic_backend.database import get_db
from clinic_backend.models.clinic import UserClinic
from clinic_backend.models.user import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class ClinicContext:
    """The acting user and the clinic every operation is scoped to."""
    user_id: int
    clinic_id: int


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    try:
        payload = jwt_handler.decode_access_token(credentials.credentials)
    except jwt.PyJWTError as exc:
        raise UnauthorizedError("Invalid token") from exc

    email = payload.get("sub")
    if not email:
        raise UnauthorizedError("Invalid token subject")

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def get_clinic_context(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clinic_id: int | None = Header(default=None, alias="X-Clinic-Id"),
) -> ClinicContext:
    memberships = db.query(UserClinic).filter(
        UserClinic.user_id == current_user.id,
    ).order_by(UserClinic.created_at.asc(), UserClinic.clinic_id.asc()).all()

    if not memberships:
        raise UnauthorizedError("You must belong to a clinic.")

    if clinic_id is None:
        return ClinicContext(user_id=current_user.id, clinic_id=memberships[0].clinic_id)

    if clinic_id not in {membership.clinic_id for membership in memberships}:
        logger.warning("User %s requested clinic %s without membership", current_user.id, clinic_id)
        raise UnauthorizedError("You do not belong to this clinic.")

    return ClinicContext(user_id=current_user.id, clinic_id=clinic_id)


def get_subscribed_clinic_context(
    current_user: User = Depends(get_current_user),
    context: ClinicContext = Depends(get_clinic_context),
) -> ClinicContext:
    """Clinic context for areas that require a subscription plan."""
    if not current_user.plan:
        raise SubscriptionRequiredError("A subscription plan is required.")
    return context

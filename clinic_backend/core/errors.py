"""Error kinds surfaced by the clinic API.

Each kind is an ``HTTPException`` with a fixed status code so route functions
can raise them directly and FastAPI renders them without extra handlers.
"""

from fastapi import HTTPException, status


class ClinicAPIError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)


class UnauthorizedError(ClinicAPIError):
    """No valid session, or the session has no clinic."""
    status_code = status.HTTP_401_UNAUTHORIZED


class SubscriptionRequiredError(ClinicAPIError):
    """The acting user has no subscription plan."""
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ClinicAPIError):
    """The entity is absent or belongs to another clinic."""
    status_code = status.HTTP_404_NOT_FOUND


class BookingValidationError(ClinicAPIError):
    status_code = status.HTTP_400_BAD_REQUEST


class SlotUnavailableError(ClinicAPIError):
    """The chosen time is no longer free for the doctor."""
    status_code = status.HTTP_409_CONFLICT


class DatabaseUnavailableError(ClinicAPIError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, detail: str = 'Database unavailable. Verify DATABASE_URL.'):
        super().__init__(detail)

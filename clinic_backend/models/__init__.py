# Import every model so string-based relationships resolve on first use.
from clinic_backend.models import appointment, clinic, doctor, patient, user  # noqa: F401

import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from clinic_backend.auth.dependencies import ClinicContext  # noqa: E402
from clinic_backend.database import Base  # noqa: E402
from clinic_backend.models.clinic import Clinic, UserClinic  # noqa: E402
from clinic_backend.models.user import User  # noqa: E402


@pytest.fixture
def db():
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_member(db):
    """Create a user, optionally linked to a new clinic."""
    def _make_member(
        email: str,
        clinic_name: str | None = None,
        plan: str | None = None,
    ) -> tuple[User, Clinic | None]:
        user = User(email=email, name=email.split('@')[0], plan=plan)
        db.add(user)
        db.flush()

        clinic = None
        if clinic_name is not None:
            clinic = Clinic(name=clinic_name)
            db.add(clinic)
            db.flush()
            db.add(UserClinic(user_id=user.id, clinic_id=clinic.id))

        db.commit()
        return user, clinic

    return _make_member


@pytest.fixture
def clinic_context(make_member) -> ClinicContext:
    user, clinic = make_member('owner@clinic.test', 'Central Clinic')
    return ClinicContext(user_id=user.id, clinic_id=clinic.id)


@pytest.fixture
def other_clinic_context(make_member) -> ClinicContext:
    user, clinic = make_member('rival@clinic.test', 'Rival Clinic')
    return ClinicContext(user_id=user.id, clinic_id=clinic.id)

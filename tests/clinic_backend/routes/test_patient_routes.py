import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from clinic_backend.models.patient import Patient
from clinic_backend.routes.patient_routes import (
    UpsertPatientRequest,
    delete_patient,
    list_patients,
    upsert_patient,
)


def _patient_request(**overrides) -> UpsertPatientRequest:
    values = {
        'name': ' Maria Lima ',
        'email': ' MARIA@EXAMPLE.COM ',
        'phone_number': '(11) 9 8765-4321',
        'sex': 'Female',
    }
    values.update(overrides)
    return UpsertPatientRequest(**values)


def test_upsert_patient_request_normalizes_fields() -> None:
    request = _patient_request()

    assert request.name == 'Maria Lima'
    assert request.email == 'maria@example.com'
    assert request.phone_number == '11987654321'
    assert request.sex == 'female'


@pytest.mark.parametrize(
    'overrides',
    [
        {'name': ''},
        {'email': 'not-an-email'},
        {'phone_number': '12345'},
        {'sex': 'unknown'},
    ],
)
def test_upsert_patient_request_rejects_invalid_fields(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        _patient_request(**overrides)


def test_upsert_patient_creates_and_updates(db, clinic_context) -> None:
    created = upsert_patient(data=_patient_request(), context=clinic_context, db=db)

    updated = upsert_patient(
        data=_patient_request(id=created.id, name='Maria Lima Souza'),
        context=clinic_context,
        db=db,
    )

    stored = db.query(Patient).filter(Patient.id == created.id).one()
    assert updated.id == created.id
    assert stored.name == 'Maria Lima Souza'
    assert stored.clinic_id == clinic_context.clinic_id
    assert db.query(Patient).count() == 1


def test_upsert_patient_rejects_patient_of_another_clinic(db, clinic_context, other_clinic_context) -> None:
    created = upsert_patient(data=_patient_request(), context=other_clinic_context, db=db)

    with pytest.raises(HTTPException) as exception_info:
        upsert_patient(data=_patient_request(id=created.id), context=clinic_context, db=db)

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'Patient not found.'


def test_list_patients_is_scoped_to_clinic(db, clinic_context, other_clinic_context) -> None:
    upsert_patient(data=_patient_request(name='Ana'), context=clinic_context, db=db)
    upsert_patient(data=_patient_request(name='Bruno'), context=clinic_context, db=db)
    upsert_patient(data=_patient_request(name='Carla'), context=other_clinic_context, db=db)

    patients = list_patients(context=clinic_context, db=db)

    assert [patient.name for patient in patients] == ['Bruno', 'Ana']


def test_delete_patient_of_another_clinic_is_not_found(db, clinic_context, other_clinic_context) -> None:
    created = upsert_patient(data=_patient_request(), context=other_clinic_context, db=db)

    with pytest.raises(HTTPException) as exception_info:
        delete_patient(patient_id=created.id, context=clinic_context, db=db)

    assert exception_info.value.status_code == 404

    delete_patient(patient_id=created.id, context=other_clinic_context, db=db)
    assert db.query(Patient).count() == 0

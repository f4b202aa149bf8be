from clinic_backend.main import app, root


def test_root_reports_status() -> None:
    assert root() == {'status': 'Clinic Scheduling API Running'}


def test_app_registers_resource_routes() -> None:
    paths = set(app.openapi()['paths'])

    assert {
        '/clinics',
        '/doctors',
        '/doctors/{doctor_id}',
        '/patients',
        '/patients/{patient_id}',
        '/appointments',
        '/appointments/available-times',
        '/appointments/{appointment_id}',
    } <= paths

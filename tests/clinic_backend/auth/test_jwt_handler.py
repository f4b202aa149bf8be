import jwt
import pytest

from clinic_backend.auth import jwt_handler
from clinic_backend.core import config


def test_access_token_round_trips_normalized_subject() -> None:
    token = jwt_handler.create_access_token(subject=' Owner@Clinic.TEST ')

    payload = jwt_handler.decode_access_token(token)

    assert payload['sub'] == 'owner@clinic.test'
    assert payload['exp'] > payload['iat']


def test_access_token_signed_with_other_secret_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    token = jwt_handler.create_access_token(subject='owner@clinic.test')
    monkeypatch.setattr(config, 'JWT_SECRET_KEY', 'another-secret')

    with pytest.raises(jwt.InvalidSignatureError):
        jwt_handler.decode_access_token(token)


def test_validate_runtime_config_requires_secret_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')
    monkeypatch.setattr(config, 'JWT_SECRET_KEY', 'change-me')

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()


def test_validate_runtime_config_rejects_zero_slot_interval(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'development')
    monkeypatch.setattr(config, 'SLOT_INTERVAL_MINUTES', 0)

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()

import pytest

from clinic_backend import print_access_token
from clinic_backend.auth import jwt_handler


def test_main_prints_token_for_email(capsys: pytest.CaptureFixture) -> None:
    print_access_token.main(['owner@clinic.test', '5'])

    token = capsys.readouterr().out.strip()
    assert jwt_handler.decode_access_token(token)['sub'] == 'owner@clinic.test'


def test_main_without_email_exits_with_usage(capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as exit_info:
        print_access_token.main([])

    assert exit_info.value.code == 2
    assert 'Usage' in capsys.readouterr().err

"""
Unit tests for the MFA credential lookup, using moto to mock STS and IAM.
"""

from datetime import datetime, timezone
from unittest import mock

import pytest
from botocore.exceptions import ClientError, NoCredentialsError

from awsmfa.credentials import (
    SessionCredentials,
    fetch_session_credentials,
    get_session_credentials,
    resolve_mfa_serial,
    user_name_from_arn,
)
from awsmfa.exceptions import CredentialLookupError, NoMfaDeviceError


@pytest.mark.parametrize(
    "arn, expected",
    [
        ("arn:aws:iam::123456789012:user/alice", "alice"),
        ("arn:aws:iam::123456789012:user/alice\n", "alice"),
        ("arn:aws:iam::123456789012:user/dev/alice", "dev/alice"),
        ("alice", "alice"),
    ],
)
def test_user_name_from_arn(arn, expected):
    assert user_name_from_arn(arn) == expected


def test_session_credentials_replacement_map():
    credentials = SessionCredentials.model_validate(
        {
            "AccessKeyId": "ASIAEXAMPLE",
            "SecretAccessKey": "secret",
            "SessionToken": "token",
            "Expiration": datetime(2030, 1, 1, tzinfo=timezone.utc),
        }
    )

    assert credentials.as_replacements() == {
        "AWS_ACCESS_KEY_ID": "ASIAEXAMPLE",
        "AWS_SECRET_ACCESS_KEY": "secret",
        "AWS_SESSION_TOKEN": "token",
    }
    assert "secret" not in repr(credentials)
    assert "token" not in repr(credentials)


def test_resolve_mfa_serial_single_device(iam_user_session, add_mfa_device):
    session, user_name = iam_user_session
    serial = add_mfa_device(user_name, "alice-phone")

    assert resolve_mfa_serial(session) == serial


def test_resolve_mfa_serial_without_device(iam_user_session):
    session, _ = iam_user_session

    with pytest.raises(NoMfaDeviceError, match="alice"):
        resolve_mfa_serial(session)


def test_resolve_mfa_serial_uses_chooser_for_several_devices(iam_user_session, add_mfa_device):
    session, user_name = iam_user_session
    first = add_mfa_device(user_name, "alice-phone")
    second = add_mfa_device(user_name, "alice-key")
    chooser = mock.Mock(return_value=second)

    assert resolve_mfa_serial(session, chooser=chooser) == second
    assert sorted(chooser.call_args.args[0]) == sorted([first, second])


def test_resolve_mfa_serial_defaults_to_first_device(iam_user_session, add_mfa_device):
    session, user_name = iam_user_session
    add_mfa_device(user_name, "alice-phone")
    add_mfa_device(user_name, "alice-key")

    serial = resolve_mfa_serial(session)

    assert serial.endswith(("alice-phone", "alice-key"))


def test_fetch_session_credentials(iam_user_session, add_mfa_device):
    session, user_name = iam_user_session
    add_mfa_device(user_name, "alice-phone")

    credentials = fetch_session_credentials(session, token_code="123456", duration_hours=12)

    assert credentials.access_key_id
    assert credentials.secret_access_key
    assert credentials.session_token
    assert set(credentials.as_replacements()) == {
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
    }


def test_get_session_credentials_requests_configured_duration():
    sts = mock.Mock()
    sts.get_session_token.return_value = {
        "Credentials": {
            "AccessKeyId": "ASIAEXAMPLE",
            "SecretAccessKey": "secret",
            "SessionToken": "token",
            "Expiration": datetime(2030, 1, 1, tzinfo=timezone.utc),
        }
    }
    session = mock.Mock()
    session.client.return_value = sts

    credentials = get_session_credentials(session, "arn:aws:iam::1:mfa/alice", "123456", 12)

    session.client.assert_called_once_with("sts")
    sts.get_session_token.assert_called_once_with(
        SerialNumber="arn:aws:iam::1:mfa/alice",
        TokenCode="123456",
        DurationSeconds=12 * 60 * 60,
    )
    assert credentials.access_key_id == "ASIAEXAMPLE"


def test_explicit_serial_number_skips_device_lookup():
    sts = mock.Mock()
    sts.get_session_token.return_value = {
        "Credentials": {
            "AccessKeyId": "ASIAEXAMPLE",
            "SecretAccessKey": "secret",
            "SessionToken": "token",
        }
    }
    session = mock.Mock()
    session.client.return_value = sts

    fetch_session_credentials(session, "123456", 1, serial_number="arn:aws:iam::1:mfa/alice")

    sts.get_caller_identity.assert_not_called()
    assert sts.get_session_token.call_args.kwargs["SerialNumber"] == "arn:aws:iam::1:mfa/alice"


def test_client_error_becomes_credential_lookup_error():
    sts = mock.Mock()
    sts.get_session_token.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "MultiFactorAuthentication failed"}},
        "GetSessionToken",
    )
    session = mock.Mock()
    session.client.return_value = sts

    with pytest.raises(CredentialLookupError, match="MultiFactorAuthentication failed") as exc_info:
        get_session_credentials(session, "serial", "000000", 1)

    assert exc_info.value.exit_code == 3


def test_botocore_error_becomes_credential_lookup_error():
    sts = mock.Mock()
    sts.get_caller_identity.side_effect = NoCredentialsError()
    session = mock.Mock()
    session.client.return_value = sts

    with pytest.raises(CredentialLookupError, match="Unable to locate credentials"):
        resolve_mfa_serial(session)

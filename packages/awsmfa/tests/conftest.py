import boto3
import pytest
from moto import mock_aws


@pytest.fixture
def aws_env(monkeypatch):
    """Fake credentials so nothing can reach a real AWS account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def iam_user_session(aws_env):
    """Session signed with an IAM user's access key inside a moto mock.

    Yields (session, user_name). The user has no MFA device yet.
    """
    with mock_aws():
        iam = boto3.client("iam", region_name="us-east-1")
        iam.create_user(UserName="alice")
        key = iam.create_access_key(UserName="alice")["AccessKey"]
        session = boto3.Session(
            aws_access_key_id=key["AccessKeyId"],
            aws_secret_access_key=key["SecretAccessKey"],
            region_name="us-east-1",
        )
        yield session, "alice"


@pytest.fixture
def add_mfa_device(iam_user_session):
    """Factory that registers and enables a virtual MFA device, returning its serial."""
    iam = boto3.client("iam", region_name="us-east-1")

    def add(user_name: str, device_name: str) -> str:
        serial = iam.create_virtual_mfa_device(VirtualMFADeviceName=device_name)[
            "VirtualMFADevice"
        ]["SerialNumber"]
        iam.enable_mfa_device(
            UserName=user_name,
            SerialNumber=serial,
            AuthenticationCode1="123456",
            AuthenticationCode2="654321",
        )
        return serial

    return add

"""Fetch MFA-backed AWS session credentials.

The caller's IAM user is resolved from its ARN, its MFA device serial is
looked up, and STS is asked for a session token with the one-time code.
"""

import re
from datetime import datetime
from typing import Callable, Optional, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, Field

from awsmfa.exceptions import CredentialLookupError, NoMfaDeviceError
from awsmfa.logging import get_logger, mask

USER_ARN_PREFIX_RE = re.compile(r"arn:aws:iam::[0-9]+:user/")

logger = get_logger(__name__)

DeviceChooser = Callable[[Sequence[str]], str]


class SessionCredentials(BaseModel):
    """Temporary credentials returned by sts:GetSessionToken."""

    access_key_id: str = Field(..., alias="AccessKeyId")
    secret_access_key: str = Field(..., alias="SecretAccessKey", repr=False)
    session_token: str = Field(..., alias="SessionToken", repr=False)
    expiration: Optional[datetime] = Field(None, alias="Expiration")

    def as_replacements(self) -> dict[str, str]:
        """The dotenv keys these credentials are written to."""
        return {
            "AWS_ACCESS_KEY_ID": self.access_key_id,
            "AWS_SECRET_ACCESS_KEY": self.secret_access_key,
            "AWS_SESSION_TOKEN": self.session_token,
        }


def user_name_from_arn(user_arn: str) -> str:
    """Strip the arn:aws:iam::<account>:user/ prefix from an IAM user ARN."""
    return USER_ARN_PREFIX_RE.sub("", user_arn.strip(), count=1)


def _aws_error(e: Exception) -> CredentialLookupError:
    if isinstance(e, ClientError):
        error = e.response.get("Error", {})
        message = error.get("Message") or error.get("Code") or str(e)
    else:
        message = str(e)
    return CredentialLookupError(f"AWS request failed: {message}")


def get_caller_arn(session: boto3.Session) -> str:
    try:
        return session.client("sts").get_caller_identity()["Arn"]
    except (BotoCoreError, ClientError) as e:
        raise _aws_error(e) from e


def list_mfa_serials(session: boto3.Session, user_name: str) -> list[str]:
    """Serial numbers of every MFA device registered for an IAM user."""
    iam = session.client("iam")
    try:
        serials = []
        for page in iam.get_paginator("list_mfa_devices").paginate(UserName=user_name):
            serials.extend(device["SerialNumber"] for device in page.get("MFADevices", []))
        return serials
    except (BotoCoreError, ClientError) as e:
        raise _aws_error(e) from e


def resolve_mfa_serial(session: boto3.Session, chooser: Optional[DeviceChooser] = None) -> str:
    """Find the MFA device serial for the session's IAM user.

    Args:
        session: Session authenticated with the user's long-term credentials
        chooser: Picks one serial when several devices are registered;
            without one the first device is used

    Raises:
        NoMfaDeviceError: If the user has no MFA device
        CredentialLookupError: If an AWS call fails
    """
    user_name = user_name_from_arn(get_caller_arn(session))
    serials = list_mfa_serials(session, user_name)
    if not serials:
        raise NoMfaDeviceError(f"No MFA device registered for IAM user {user_name}")
    if len(serials) > 1 and chooser is not None:
        return chooser(serials)
    return serials[0]


def get_session_credentials(
    session: boto3.Session,
    serial_number: str,
    token_code: str,
    duration_hours: int,
) -> SessionCredentials:
    """Exchange an MFA code for temporary session credentials."""
    try:
        response = session.client("sts").get_session_token(
            SerialNumber=serial_number,
            TokenCode=token_code,
            DurationSeconds=duration_hours * 60 * 60,
        )
    except (BotoCoreError, ClientError) as e:
        raise _aws_error(e) from e

    credentials = SessionCredentials.model_validate(response["Credentials"])
    logger.info(
        "Fetched session credentials",
        extra={
            "access_key_id": mask(credentials.access_key_id),
            "expiration": credentials.expiration.isoformat() if credentials.expiration else None,
        },
    )
    return credentials


def fetch_session_credentials(
    session: boto3.Session,
    token_code: str,
    duration_hours: int,
    serial_number: Optional[str] = None,
    chooser: Optional[DeviceChooser] = None,
) -> SessionCredentials:
    """Resolve the MFA device (unless given) and fetch session credentials."""
    if serial_number is None:
        serial_number = resolve_mfa_serial(session, chooser=chooser)
    logger.debug("Using MFA device", extra={"serial_number": serial_number})
    return get_session_credentials(session, serial_number, token_code, duration_hours)

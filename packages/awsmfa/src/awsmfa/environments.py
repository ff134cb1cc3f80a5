"""
Environment and AWS session helpers for awsmfa.
Reads optional defaults from ~/.config/awsmfa/env.local and the process environment.
"""

import os
from functools import cache
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError
from dotenv import load_dotenv

from awsmfa.exceptions import CredentialLookupError

DEFAULT_PROFILE = "default"
DEFAULT_DURATION_HOURS = 36


@cache
def user_env_file() -> Path:
    """Location of the optional user-level defaults file."""
    config_home = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / "awsmfa" / "env.local"


def load_user_env(path: Optional[Path] = None) -> bool:
    """Load user-level defaults without overriding the real environment.

    Returns:
        True if a defaults file was found and loaded
    """
    path = path or user_env_file()
    if not path.is_file():
        return False
    return load_dotenv(dotenv_path=path, override=False)


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable, treating blank and "-" as unset."""
    value = os.getenv(key, default)
    if value is not None:
        value = value.strip()
    if value in ["", "-"] or value is None:
        return None
    return value


def default_profile() -> str:
    return get_env("AWSMFA_PROFILE") or get_env("AWS_PROFILE") or DEFAULT_PROFILE


def default_duration_hours() -> str:
    return get_env("AWSMFA_DURATION_HOURS") or str(DEFAULT_DURATION_HOURS)


def default_region() -> str | None:
    return get_env("AWS_REGION") or get_env("AWS_DEFAULT_REGION")


def default_log_level() -> str:
    return get_env("AWSMFA_LOG_LEVEL") or "INFO"


def default_log_format() -> str:
    return get_env("AWSMFA_LOG_FORMAT") or "text"


def get_aws_session(profile: str | None = None, region: str | None = None) -> boto3.Session:
    """Get AWS session for the given profile.

    The "default" profile defers to boto3's normal credential chain, so
    environment credentials work without a ~/.aws/credentials file.
    """
    profile_name = None if profile in (None, DEFAULT_PROFILE) else profile
    try:
        session = boto3.session.Session(profile_name=profile_name, region_name=region)
    except BotoCoreError as e:
        raise CredentialLookupError(f"Could not create AWS session: {e}") from e
    if profile_name is not None and profile_name not in session.available_profiles:
        raise CredentialLookupError(f"The config profile ({profile_name}) could not be found")
    return session

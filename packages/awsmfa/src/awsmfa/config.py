"""Run configuration, assembled once after argument parsing and never mutated."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from awsmfa.environments import DEFAULT_DURATION_HOURS, DEFAULT_PROFILE
from awsmfa.exceptions import ConfigError

MIN_DURATION_HOURS = 1
MAX_DURATION_HOURS = 36

# Exit codes for configuration errors
EXIT_BAD_MFA_CODE = 1
EXIT_BAD_DURATION = 2


class MfaConfig(BaseModel):
    """Everything one awsmfa run needs."""

    model_config = ConfigDict(frozen=True)

    mfa_code: str = Field(..., description="One-time code from the MFA device")
    profile: str = Field(default=DEFAULT_PROFILE, description="AWS profile with long-term credentials")
    duration_hours: int = Field(
        default=DEFAULT_DURATION_HOURS,
        ge=MIN_DURATION_HOURS,
        le=MAX_DURATION_HOURS,
        description="Hours the session credentials stay valid",
    )
    directory: Path = Field(default_factory=Path.cwd, description="Directory holding the .env file")
    serial_number: Optional[str] = Field(None, description="MFA device serial, skips the device lookup")
    region: Optional[str] = Field(None, description="AWS region for the STS and IAM clients")

    @field_validator("mfa_code")
    @classmethod
    def check_mfa_code(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("MFA code must be supplied")
        if not (value.isdigit() and len(value) == 6):
            raise ValueError("MFA code must be 6 digits")
        return value


def build_config(**values) -> MfaConfig:
    """Validate raw option values into an MfaConfig.

    Raises:
        ConfigError: With exit code 2 for an out-of-range duration, 1 otherwise
    """
    values = {key: value for key, value in values.items() if value is not None}
    try:
        return MfaConfig(**values)
    except ValidationError as e:
        error = e.errors()[0]
        field_name = error["loc"][0] if error["loc"] else ""
        if field_name == "duration_hours" and error["type"] == "int_parsing":
            raise ConfigError(
                f"duration must be a whole number of hours, got {error['input']!r}",
                exit_code=EXIT_BAD_DURATION,
            ) from e
        if field_name == "duration_hours":
            raise ConfigError(
                f"duration must be between {MIN_DURATION_HOURS} and {MAX_DURATION_HOURS} hours",
                exit_code=EXIT_BAD_DURATION,
            ) from e
        message = error["msg"].removeprefix("Value error, ")
        if field_name != "mfa_code":
            message = f"{field_name}: {message}"
        raise ConfigError(message, exit_code=EXIT_BAD_MFA_CODE) from e

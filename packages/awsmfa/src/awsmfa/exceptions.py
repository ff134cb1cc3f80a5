"""Exceptions raised by awsmfa.

Every error carries the process exit code the command line reports for it.
"""


class AwsMfaError(Exception):
    """Base class for all awsmfa errors."""

    exit_code = 1


class ConfigError(AwsMfaError):
    """Raised when the run configuration is missing or invalid."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class CredentialLookupError(AwsMfaError):
    """Raised when AWS refuses or fails a credential lookup call."""

    exit_code = 3


class NoMfaDeviceError(CredentialLookupError):
    """Raised when the calling IAM user has no MFA device registered."""

    pass


class DotenvWriteError(AwsMfaError):
    """Raised when the dotenv file cannot be read or written."""

    exit_code = 4

"""Exceptions raised by aws-env."""

from typing import Optional, Sequence


class AWSEnvError(Exception):
    """Base class for all aws-env errors."""


class UsageError(AWSEnvError):
    """Raised when the command line is missing required arguments."""


class CredentialProviderError(AWSEnvError):
    """Raised by a credential provider when it cannot produce credentials."""


class MFARequiredException(CredentialProviderError):
    """Exception raised when MFA is required but no code could be read."""
    def __init__(self, identity: str, mfa_device: str):
        self.identity = identity
        self.mfa_device = mfa_device
        super().__init__(f"MFA code required for '{identity}' with device '{mfa_device}'")


class ResolutionError(AWSEnvError):
    """Raised when credentials could not be resolved for an identity."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class UnsupportedFormatError(AWSEnvError):
    """Raised when an unknown shell dialect is requested."""

    def __init__(self, format: str):
        self.format = format
        super().__init__(f"unsupported format '{format}'")


class LaunchError(AWSEnvError):
    """Raised when the requested command cannot be started."""

    def __init__(self, command: str, message: Optional[str] = None):
        self.command = command
        super().__init__(message or f"executable file not found in $PATH: '{command}'")


class ChildExitError(AWSEnvError):
    """Raised when a spawned child exits non-zero.

    The child already reported its own failure, so the CLI only mirrors
    the exit code.
    """

    def __init__(self, argv: Sequence[str], returncode: int):
        self.argv = list(argv)
        self.returncode = returncode
        super().__init__(f"'{argv[0]}' exited with status {returncode}")

"""AWS credential resolution."""

from .providers import (
    AWSCredentials,
    Boto3CredentialProvider,
    CredentialProvider,
    prompt_mfa_code,
)
from .resolver import CredentialResolver, ResolutionOptions, ResolvedSession

__all__ = [
    "AWSCredentials",
    "Boto3CredentialProvider",
    "CredentialProvider",
    "CredentialResolver",
    "ResolutionOptions",
    "ResolvedSession",
    "prompt_mfa_code",
]

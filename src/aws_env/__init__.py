"""aws-env - run commands with temporary AWS credentials."""

__version__ = "0.1.0"

from .credentials.providers import AWSCredentials, Boto3CredentialProvider, CredentialProvider
from .credentials.resolver import CredentialResolver, ResolutionOptions, ResolvedSession
from .identity import ProfileIdentity, RoleIdentity, classify

__all__ = [
    "AWSCredentials",
    "Boto3CredentialProvider",
    "CredentialProvider",
    "CredentialResolver",
    "ProfileIdentity",
    "ResolutionOptions",
    "ResolvedSession",
    "RoleIdentity",
    "classify",
]

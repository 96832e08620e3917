"""Resolution of an identity into credentials and a region."""

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import MutableMapping, Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import CredentialProviderError, ResolutionError
from ..identity import Identity, ProfileIdentity, RoleIdentity
from .providers import AWSCredentials, CredentialProvider

logger = logging.getLogger(__name__)

AMBIENT_CREDENTIAL_VARIABLES = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY")


@dataclass
class ResolutionOptions:
    """Options that influence how credentials are resolved."""
    region: Optional[str] = None
    duration: Optional[timedelta] = None
    token: Optional[str] = None
    mfa_serial: Optional[str] = None
    output_format: Optional[str] = None


@dataclass
class ResolvedSession:
    """Credentials for an identity together with the effective region."""
    identity: Identity
    credentials: AWSCredentials
    region: Optional[str] = None


class CredentialResolver:
    """Resolves identities through a credential provider."""

    def __init__(
        self,
        provider: CredentialProvider,
        environ: Optional[MutableMapping[str, str]] = None,
    ):
        """Initialize the resolver.

        Args:
            provider: Provider used to obtain credentials
            environ: Environment cleared of ambient credentials before a
                profile is resolved (defaults to ``os.environ``)
        """
        self.provider = provider
        self.environ = os.environ if environ is None else environ

    def resolve(self, identity: Identity, options: ResolutionOptions) -> ResolvedSession:
        """Resolve credentials for the identity.

        Raises:
            ResolutionError: If the provider fails for any reason.
        """
        try:
            if isinstance(identity, RoleIdentity):
                credentials = self.provider.assume_role(
                    identity.arn,
                    duration=options.duration,
                    token=options.token,
                    mfa_serial=options.mfa_serial,
                    region=options.region,
                )
                provider_region = None
            elif isinstance(identity, ProfileIdentity):
                self._clear_ambient_credentials()
                credentials = self.provider.resolve_profile(
                    identity.name, duration=options.duration
                )
                provider_region = credentials.region
            else:
                raise TypeError(f"unknown identity type {type(identity).__name__}")
        except (CredentialProviderError, BotoCoreError, ClientError) as e:
            logger.debug(f"Credential resolution failed for '{identity.raw}': {e}")
            raise ResolutionError(str(e), cause=e) from e

        region = options.region or provider_region or None
        logger.info(f"Resolved credentials for '{identity.raw}', region: {region or 'none'}")
        return ResolvedSession(identity=identity, credentials=credentials, region=region)

    def _clear_ambient_credentials(self) -> None:
        """Drop inherited static keys so they cannot shadow the profile."""
        for name in AMBIENT_CREDENTIAL_VARIABLES:
            if self.environ.pop(name, None) is not None:
                logger.debug(f"Cleared ambient {name}")

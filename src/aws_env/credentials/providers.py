"""Credential providers for AWS authentication."""

import getpass
import logging
import sys
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, Optional

import boto3
import botocore.session
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import CredentialProviderError, MFARequiredException

logger = logging.getLogger(__name__)

MFACallback = Callable[[str, str], str]


@dataclass
class AWSCredentials:
    """AWS credentials container."""
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)
    region: Optional[str] = None
    profile_name: Optional[str] = None

    def __post_init__(self):
        if not self.session_token:
            self.session_token = None


class CredentialProvider(ABC):
    """Base class for credential providers."""

    @abstractmethod
    def resolve_profile(
        self, profile: str, duration: Optional[timedelta] = None
    ) -> AWSCredentials:
        """Resolve credentials and region for a configured profile."""

    @abstractmethod
    def assume_role(
        self,
        role_arn: str,
        duration: Optional[timedelta] = None,
        token: Optional[str] = None,
        mfa_serial: Optional[str] = None,
        region: Optional[str] = None,
    ) -> AWSCredentials:
        """Assume a role directly and return its temporary credentials."""


def prompt_mfa_code(identity: str, mfa_device: str) -> str:
    """Read an MFA code from standard input.

    Uses a hidden prompt when attached to a terminal and reads a single
    line otherwise, so the code can be piped in.
    """
    if sys.stdin.isatty():
        logger.debug("Using terminal prompt for MFA")
        try:
            code = getpass.getpass(f"MFA code for {mfa_device}: ", stream=sys.stderr)
        except EOFError:
            raise MFARequiredException(identity, mfa_device) from None
    else:
        logger.debug("Reading MFA code from standard input")
        code = sys.stdin.readline()

    code = code.strip()
    if not code:
        raise MFARequiredException(identity, mfa_device)
    return code


class Boto3CredentialProvider(CredentialProvider):
    """Provider backed by boto3 and the shared AWS config files."""

    def __init__(
        self,
        role_session_name: str = "aws-env",
        mfa_callback: Optional[MFACallback] = None,
        session_factory: Callable[..., boto3.Session] = boto3.Session,
        default_duration: Optional[timedelta] = None,
    ):
        """Initialize the provider.

        Args:
            role_session_name: Prefix of the session name sent to STS
            mfa_callback: Callback returning an MFA code for
                ``(identity, mfa_device)`` (defaults to reading stdin)
            session_factory: Factory for the boto3 session used as the
                caller when assuming a role
            default_duration: Duration requested by ``assume_role`` when
                none is given (STS applies its own default when unset)
        """
        self.role_session_name = role_session_name
        self._mfa_callback = mfa_callback or prompt_mfa_code
        self._session_factory = session_factory
        self.default_duration = default_duration

    def resolve_profile(
        self, profile: str, duration: Optional[timedelta] = None
    ) -> AWSCredentials:
        """Get credentials from a profile in ~/.aws/config or ~/.aws/credentials.

        Profiles that chain to ``role_arn`` are assumed by botocore, which
        prompts for an MFA code itself when the profile sets ``mfa_serial``.
        Without ``duration`` the profile keeps its own ``duration_seconds``.
        """
        logger.info(f"Resolving credentials for profile '{profile}'")
        try:
            session = boto3.Session(botocore_session=self._profile_session(profile, duration))
            credentials = session.get_credentials()
            if credentials is None:
                raise CredentialProviderError(
                    f"no credentials found for profile '{profile}'"
                )
            frozen = credentials.get_frozen_credentials()
            region = session.region_name
        except (BotoCoreError, ClientError) as e:
            raise CredentialProviderError(str(e)) from e

        logger.debug(f"Profile '{profile}' resolved via {credentials.method}, region: {region}")
        return AWSCredentials(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token,
            region=region,
            profile_name=profile,
        )

    def _profile_session(
        self, profile: str, duration: Optional[timedelta] = None
    ) -> botocore.session.Session:
        botocore_session = botocore.session.Session(profile=profile)
        if duration is not None:
            self._apply_profile_duration(botocore_session, profile, duration)
        return botocore_session

    def _apply_profile_duration(
        self, botocore_session: botocore.session.Session, profile: str, duration: timedelta
    ) -> None:
        """Set ``duration_seconds`` on a profile that assumes a role."""
        profiles = botocore_session.full_config.get("profiles", {})
        profile_config = profiles.get(profile)
        if profile_config is None or "role_arn" not in profile_config:
            return
        profile_config["duration_seconds"] = str(int(duration.total_seconds()))
        logger.debug(f"Profile '{profile}' will assume its role for {duration}")

    def assume_role(
        self,
        role_arn: str,
        duration: Optional[timedelta] = None,
        token: Optional[str] = None,
        mfa_serial: Optional[str] = None,
        region: Optional[str] = None,
    ) -> AWSCredentials:
        """Get temporary credentials for a role using AWS STS.

        ``token`` is either an MFA device serial (an ARN), in which case the
        code is prompted for, or the MFA code itself, in which case the
        device comes from ``mfa_serial`` or is looked up for the caller.
        """
        logger.info(f"Assuming role '{role_arn}'")
        try:
            session = self._session_factory(region_name=region)
            sts_client = session.client("sts")

            params = {
                "RoleArn": role_arn,
                "RoleSessionName": f"{self.role_session_name}-{time.time_ns()}",
            }
            duration = duration or self.default_duration
            if duration is not None:
                params["DurationSeconds"] = int(duration.total_seconds())

            if token:
                serial, code = self._resolve_mfa(session, role_arn, token, mfa_serial)
                params["SerialNumber"] = serial
                params["TokenCode"] = code

            response = sts_client.assume_role(**params)
        except (BotoCoreError, ClientError) as e:
            raise CredentialProviderError(str(e)) from e

        temp_creds = response["Credentials"]
        logger.info(f"Temporary credentials issued for '{role_arn}', expires: {temp_creds['Expiration']}")
        return AWSCredentials(
            access_key_id=temp_creds["AccessKeyId"],
            secret_access_key=temp_creds["SecretAccessKey"],
            session_token=temp_creds["SessionToken"],
        )

    def _resolve_mfa(self, session, role_arn: str, token: str, mfa_serial: Optional[str]):
        """Return the ``(serial, code)`` pair to send with AssumeRole."""
        if token.startswith("arn:"):
            logger.info(f"MFA device: {token}")
            return token, self._mfa_callback(role_arn, token)

        serial = mfa_serial or self._get_mfa_device(session)
        if not serial:
            raise CredentialProviderError(
                "an MFA code was given but no MFA device was found; pass --mfa-serial"
            )
        return serial, token

    def _get_mfa_device(self, session) -> Optional[str]:
        """Get the first MFA device of the calling IAM user."""
        identity = session.client("sts").get_caller_identity()
        user_arn = identity["Arn"]

        if ":user/" not in user_arn:
            logger.warning(f"Could not extract username from ARN: {user_arn}")
            return None
        username = user_arn.split(":user/")[-1].split("/")[-1]

        response = session.client("iam").list_mfa_devices(UserName=username)
        if response["MFADevices"]:
            return response["MFADevices"][0]["SerialNumber"]
        return None

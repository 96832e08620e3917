"""Classification of the identity argument into a profile or a role."""

import re
from dataclasses import dataclass
from typing import Optional, Union

ROLE_ARN_PATTERN = re.compile(r"^arn:aws:iam::(.+):role/([^/]+)(/.+)?$")


@dataclass(frozen=True)
class ProfileIdentity:
    """A named profile from the shared AWS config files."""
    name: str

    @property
    def raw(self) -> str:
        return self.name


@dataclass(frozen=True)
class RoleIdentity:
    """A role ARN to assume directly, without a configured profile."""
    arn: str
    account_id: str
    role_name: str
    session_path_suffix: Optional[str] = None

    @property
    def raw(self) -> str:
        return self.arn


Identity = Union[ProfileIdentity, RoleIdentity]


def classify(raw: str) -> Identity:
    """Classify an identity string.

    Strings shaped like ``arn:aws:iam::<account>:role/<name>[/<suffix>]``
    become a :class:`RoleIdentity`; everything else is treated as a
    profile name.
    """
    match = ROLE_ARN_PATTERN.match(raw)
    if match is None:
        return ProfileIdentity(name=raw)

    account_id, role_name, suffix = match.groups()
    return RoleIdentity(
        arn=raw,
        account_id=account_id,
        role_name=role_name,
        session_path_suffix=suffix,
    )

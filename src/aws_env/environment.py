"""Materialization of resolved credentials as environment variables."""

import logging
import os
import sys
from typing import Dict, List, Mapping, Optional, Tuple

from .credentials.resolver import ResolvedSession
from .errors import UnsupportedFormatError

logger = logging.getLogger(__name__)

TOKEN_VARIABLES = ("AWS_SESSION_TOKEN", "AWS_SECURITY_TOKEN")
REGION_VARIABLES = ("AWS_DEFAULT_REGION", "AWS_REGION")


def _escape_posix(value: str) -> str:
    for char in ("\\", '"', "$", "`"):
        value = value.replace(char, "\\" + char)
    return value


def _escape_fish(value: str) -> str:
    for char in ("\\", '"', "$"):
        value = value.replace(char, "\\" + char)
    return value


def _escape_powershell(value: str) -> str:
    for char in ("`", '"', "$"):
        value = value.replace(char, "`" + char)
    return value


# dialect -> (line template, escape function, eval hint template)
_DIALECTS = {
    "sh": ('export {name}="{value}";', _escape_posix, "# eval $({invocation})"),
    "fish": ('set -gx {name} "{value}";', _escape_fish, "# eval ({invocation})"),
    "powershell": ('$env:{name}="{value}"', _escape_powershell, "# {invocation} | Invoke-Expression"),
}
_DIALECTS["bash"] = _DIALECTS["sh"]


def session_variables(session: ResolvedSession) -> List[Tuple[str, str]]:
    """Return the credential variables for a session in emission order."""
    credentials = session.credentials
    variables = [
        ("AWS_ACCESS_KEY_ID", credentials.access_key_id),
        ("AWS_SECRET_ACCESS_KEY", credentials.secret_access_key),
    ]
    if credentials.session_token:
        variables.append(("AWS_SESSION_TOKEN", credentials.session_token))
        variables.append(("AWS_SECURITY_TOKEN", credentials.session_token))
    if session.region:
        variables.append(("AWS_DEFAULT_REGION", session.region))
        variables.append(("AWS_REGION", session.region))
    return variables


def build_child_environment(
    session: ResolvedSession, base_env: Mapping[str, str]
) -> Dict[str, str]:
    """Build the environment for a child process.

    Starts from a copy of ``base_env`` and overwrites the credential
    variables. Inherited token or region variables that the session does
    not provide are removed so they cannot pair with the new keys.
    ``AWS_IDENTITY`` is set to the identity as given by the caller.
    Unrelated variables are left alone.
    """
    env = dict(base_env)
    if not session.credentials.session_token:
        for name in TOKEN_VARIABLES:
            env.pop(name, None)
    if not session.region:
        for name in REGION_VARIABLES:
            env.pop(name, None)
    env["AWS_IDENTITY"] = session.identity.raw
    env.update(session_variables(session))
    return env


def format_env(session: ResolvedSession, format: str, invocation: str) -> List[str]:
    """Format the session variables as shell commands.

    Args:
        session: Resolved session to export
        format: One of ``sh``, ``bash``, ``fish`` or ``powershell``
        invocation: Command line shown in the eval hint

    Returns:
        Lines to print, without trailing newlines

    Raises:
        UnsupportedFormatError: If ``format`` is not a known dialect.
    """
    try:
        template, escape, hint = _DIALECTS[format]
    except KeyError:
        raise UnsupportedFormatError(format) from None

    lines = [
        template.format(name=name, value=escape(value))
        for name, value in session_variables(session)
    ]
    lines.append("")
    lines.append("# Run this to configure your shell:")
    lines.append(hint.format(invocation=invocation))
    return lines


def check_format(format: str) -> str:
    """Return ``format`` if it is a known dialect."""
    if format not in _DIALECTS:
        raise UnsupportedFormatError(format)
    return format


def default_format(
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    fallback: str = "bash",
) -> str:
    """Guess the caller's shell dialect from ``SHELL``."""
    environ = os.environ if environ is None else environ
    platform = sys.platform if platform is None else platform

    shell = environ.get("SHELL", "")
    if not shell:
        if platform.startswith("win"):
            return "powershell"
    elif shell.endswith("fish"):
        return "fish"
    return fallback

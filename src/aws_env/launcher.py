"""Launching a command with resolved credentials."""

import logging
import os
import shutil
import subprocess
from typing import Mapping, Optional, Sequence

from .errors import ChildExitError, LaunchError

logger = logging.getLogger(__name__)


def find_executable(command: str, env: Mapping[str, str]) -> str:
    """Resolve ``command`` against the ``PATH`` of ``env``."""
    path = shutil.which(command, path=env.get("PATH", os.defpath))
    if path is None:
        raise LaunchError(command)
    return path


def launch(
    argv: Sequence[str], env: Mapping[str, str], replace: Optional[bool] = None
) -> int:
    """Run ``argv`` with ``env`` as its complete environment.

    On POSIX the current process is replaced so the command inherits the
    terminal and receives signals directly. Otherwise the command is
    spawned and waited for.

    Returns:
        0 when a spawned command succeeds (never returns after a replace)

    Raises:
        LaunchError: If the command is not found or cannot be executed.
        ChildExitError: If a spawned command exits non-zero.
    """
    if not argv:
        raise LaunchError("", "no command given")
    if replace is None:
        replace = os.name == "posix"

    path = find_executable(argv[0], env)
    logger.debug(f"Launching {path} (replace={replace})")

    if replace:
        try:
            os.execve(path, list(argv), dict(env))
        except OSError as e:
            raise LaunchError(argv[0], f"cannot execute '{argv[0]}': {e.strerror}") from e

    try:
        returncode = subprocess.call([path, *argv[1:]], env=dict(env))
    except OSError as e:
        raise LaunchError(argv[0], f"cannot execute '{argv[0]}': {e.strerror}") from e

    if returncode != 0:
        raise ChildExitError(argv, returncode)
    return returncode

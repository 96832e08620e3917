"""Command-line interface for aws-env."""

import logging
import os
import shlex
import sys
from datetime import timedelta
from typing import Optional, Tuple

import click
from pydantic import ValidationError

from . import __version__
from .config import get_settings
from .credentials.providers import Boto3CredentialProvider
from .credentials.resolver import CredentialResolver, ResolutionOptions
from .durations import DURATION
from .environment import build_child_environment, check_format, default_format, format_env
from .errors import AWSEnvError, ChildExitError, UsageError
from .identity import classify
from .launcher import launch

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {
    "allow_interspersed_args": False,
    "help_option_names": ["-h", "--help"],
}


def _configure_logging(debug: bool, level_name: str) -> None:
    level = logging.DEBUG if debug else getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def _invocation() -> str:
    """Command line used to run this program, for the eval hint."""
    program = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "aws-env"
    if program == "__main__.py":
        program = "python -m aws_env"
    return " ".join([program] + [shlex.quote(arg) for arg in sys.argv[1:]])


def _exit_code(returncode: int) -> int:
    # Children killed by a signal report -N.
    return 128 - returncode if returncode < 0 else returncode


@click.command(
    context_settings=CONTEXT_SETTINGS,
    options_metavar="[OPTIONS]",
)
@click.argument('identity', metavar='<profile/role_arn>', required=False)
@click.argument('command', nargs=-1, type=click.UNPROCESSED)
@click.option('--region', default=None, help='The aws default region.')
@click.option('--duration', type=DURATION, default=None,
              help='The duration that temporary credentials will be valid for (e.g. 1h, 15m).')
@click.option('--token', default=None,
              help='The mfa token or device serial to use. [only considered if assume by <role_arn>]')
@click.option('--mfa-serial', default=None,
              help='The mfa device serial to send with a --token code. [only considered if assume by <role_arn>]')
@click.option('--format', 'output_format', default=None,
              help='The environment variables format: sh, bash, fish or powershell. '
                   '[only considered if no <command> is provided]')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.version_option(__version__, prog_name='aws-env')
@click.pass_context
def main(
    ctx: click.Context,
    identity: Optional[str],
    command: Tuple[str, ...],
    region: Optional[str],
    duration: Optional[timedelta],
    token: Optional[str],
    mfa_serial: Optional[str],
    output_format: Optional[str],
    debug: bool,
):
    """Run COMMAND with credentials for a profile or role, or print them
    as shell commands when no COMMAND is given."""
    try:
        settings = get_settings()
    except ValidationError as e:
        click.echo(f"\nERROR: invalid settings: {e}", err=True)
        ctx.exit(1)
    _configure_logging(debug, settings.log_level)

    try:
        if not identity:
            click.echo(ctx.get_usage(), err=True)
            raise UsageError("<profile/role_arn> argument is missing")

        options = ResolutionOptions(
            region=region,
            duration=duration,
            token=token,
            mfa_serial=mfa_serial,
        )
        if not command:
            options.output_format = check_format(
                output_format
                or settings.default_format
                or default_format(fallback=settings.fallback_format)
            )

        resolver = CredentialResolver(
            Boto3CredentialProvider(
                role_session_name=settings.role_session_name,
                default_duration=settings.default_duration,
            )
        )
        session = resolver.resolve(classify(identity), options)

        if command:
            launch(command, build_child_environment(session, os.environ))
        else:
            for line in format_env(session, options.output_format, _invocation()):
                click.echo(line)
    except ChildExitError as e:
        logger.debug(f"Command exited with status {e.returncode}")
        ctx.exit(_exit_code(e.returncode))
    except AWSEnvError as e:
        click.echo(f"\nERROR: {e}", err=True)
        ctx.exit(1)


if __name__ == "__main__":
    main()

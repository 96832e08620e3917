"""Parsing of credential duration values such as ``1h30m``."""

import re
from datetime import timedelta
from typing import Optional

import click

_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
}
_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ms|h|m|s)")


def _sum_components(value: str, text: str) -> timedelta:
    if value.isdigit():
        return timedelta(seconds=int(value))

    total = timedelta(0)
    position = 0
    for match in _COMPONENT.finditer(value):
        if match.start() != position:
            break
        total += float(match.group(1)) * _UNITS[match.group(2)]
        position = match.end()
    if position != len(value):
        raise ValueError(f"invalid duration '{text}'")
    return total


def parse_duration(text: str) -> timedelta:
    """Parse a duration string.

    Accepts bare integer seconds (``3600``) or one or more ``<number><unit>``
    components with units ``h``, ``m``, ``s`` and ``ms`` (``1h30m``,
    ``1.5h``, ``900s``).

    Raises:
        ValueError: If the text is not a valid, positive duration.
    """
    value = text.strip()
    if not value:
        raise ValueError("empty duration")

    try:
        total = _sum_components(value, text)
    except OverflowError:
        raise ValueError(f"duration out of range: '{text}'") from None

    if total <= timedelta(0):
        raise ValueError(f"duration must be positive, got '{text}'")
    return total


class DurationParamType(click.ParamType):
    """Click parameter type for :func:`parse_duration`."""

    name = "duration"

    def convert(self, value, param: Optional[click.Parameter], ctx: Optional[click.Context]):
        if isinstance(value, timedelta):
            return value
        try:
            return parse_duration(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


DURATION = DurationParamType()

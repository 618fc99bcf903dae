"""
utility.py

Various stand-alone utility functions.
"""
import datetime
import sys

UTC = datetime.timezone.utc

TRUE_VALUES = ('1', 'true', 'yes', 'on')
FALSE_VALUES = ('0', 'false', 'no', 'off')


def parse_bool(value: str) -> bool:
    """Interpret an environment-style boolean string."""
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError(f'cannot interpret "{value}" as a boolean')


def now() -> datetime.datetime:
    """Current time (in UTC) as datetime."""
    return datetime.datetime.now(tz=UTC)


def now_iso() -> str:
    """Current time (in UTC) as isoformat string."""
    return now().isoformat()


def my_name() -> str:
    """Return the name of the calling function."""
    return sys._getframe(1).f_code.co_name

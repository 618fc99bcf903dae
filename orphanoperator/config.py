"""
config.py

Operator configuration, read from the environment.
"""
import dataclasses
import os
from typing import Mapping, Optional

from orphanoperator.utility import parse_bool


@dataclasses.dataclass(frozen=True)
class OperatorConfig:
    orphan_cleanup_enabled: bool = True
    clean_interval: float = 60.0
    initial_delay: float = 30.0

    @classmethod
    def from_env(cls,
                 environ: Optional[Mapping[str, str]] = None
                 ) -> 'OperatorConfig':
        """
        from_env

        Build the configuration from ORPHAN_CLEANUP_* environment variables,
        falling back to the defaults for anything unset.
        """
        env = os.environ if environ is None else environ
        enabled = cls.orphan_cleanup_enabled
        if env.get('ORPHAN_CLEANUP_ENABLED'):
            enabled = parse_bool(env['ORPHAN_CLEANUP_ENABLED'])
        interval = float(env.get('ORPHAN_CLEANUP_INTERVAL',
                                 cls.clean_interval))
        initial_delay = float(env.get('ORPHAN_CLEANUP_INITIAL_DELAY',
                                      cls.initial_delay))
        if interval <= 0:
            raise ValueError(
                f'ORPHAN_CLEANUP_INTERVAL must be positive, not {interval}')
        if initial_delay < 0:
            raise ValueError(
                'ORPHAN_CLEANUP_INITIAL_DELAY must not be negative, '
                f'not {initial_delay}')
        return cls(orphan_cleanup_enabled=enabled,
                   clean_interval=interval,
                   initial_delay=initial_delay)

"""Class for handling environment configuration.

Settings are read from environment variables; command-line flags, when
given, take precedence over them.
"""

from os import environ
from typing import Any, Mapping, Optional

from ctvgen.util import class_logger

DEFAULT_LOG_FORMAT = '%(levelname)s:%(name)s:%(message)s'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class Env:
    """Wraps the run configuration."""

    class Error(Exception):
        pass

    def __init__(self, overrides: Optional[Mapping[str, Any]] = None):
        self.logger = class_logger(__name__, self.__class__.__name__)
        overrides = {k: v for k, v in (overrides or {}).items()
                     if v is not None}

        self.rpc_url = overrides.get('rpc_url') or self.required('RPC_URL')
        self.cookie_file = overrides.get(
            'cookie_file', self.default('COOKIE_FILE', None))
        self.transaction_count = overrides.get(
            'transaction_count', self.integer('TRANSACTION_COUNT', 100))
        self.out_file = overrides.get(
            'out_file', self.default('OUT_FILE', '-'))
        self.seed = overrides.get('seed', self.integer('SEED', None))
        self.rpc_timeout = self.integer('RPC_TIMEOUT', 30)
        self.log_level = overrides.get(
            'log_level', self.default('LOG_LEVEL', 'info')).upper()
        self.log_format = self.default('LOG_FORMAT', DEFAULT_LOG_FORMAT)

        if self.log_level not in LOG_LEVELS:
            raise self.Error(f'unknown log level {self.log_level!r}')
        if self.transaction_count < 0:
            raise self.Error(f'transaction count must be non-negative, '
                             f'got {self.transaction_count}')
        if self.seed is not None and self.seed < 0:
            raise self.Error(f'seed must be non-negative, got {self.seed}')
        if self.rpc_timeout <= 0:
            raise self.Error(f'RPC_TIMEOUT must be positive, '
                             f'got {self.rpc_timeout}')
        if self.cookie_file is None and '@' not in self.rpc_url:
            self.logger.warning('no cookie file or URL credentials given, '
                                'RPC calls will be unauthenticated')

    @classmethod
    def default(cls, envvar, default):
        return environ.get(envvar, default)

    @classmethod
    def required(cls, envvar):
        value = environ.get(envvar)
        if value is None:
            raise cls.Error(f'required envvar {envvar} not set')
        return value

    @classmethod
    def integer(cls, envvar, default):
        value = environ.get(envvar)
        if value is None:
            return default
        try:
            return int(value)
        except Exception:
            raise cls.Error(f'cannot convert envvar {envvar} value {value} '
                            f'to an integer')

    def __repr__(self) -> str:
        return (f'{self.__class__.__name__}('
                f'transaction_count={self.transaction_count}, '
                f'out_file={self.out_file!r})')

"""Unit tests for handle_redis_connection_error decorator.

Test coverage includes:
    1. Normal function execution
    2. Connection, timeout and command errors are converted into DataStoreError
    3. Function metadata preservation
"""

import pytest
import redis
from unittest.mock import MagicMock

from linkshortener.dao.redis.helpers import handle_redis_connection_error
from linkshortener.dao.exceptions import DataStoreError


class DummyDAO:
    def __init__(self, error=None):
        self.error = error
        self.redis = MagicMock()
        self.redis.connection_pool.connection_kwargs = {'host': 'localhost', 'port': 6379, 'db': 0}

    @handle_redis_connection_error
    def call(self):
        if self.error is not None:
            raise self.error
        return 'OK'


# -------------------------------
# 1. Normal execution
# -------------------------------


def test_decorator_allows_normal_execution():
    """Ensure the wrapped function executes normally when no error occurs."""
    assert DummyDAO().call() == 'OK'


# -------------------------------
# 2. Connection error handling
# -------------------------------


@pytest.mark.parametrize(
    'error',
    [redis.exceptions.ConnectionError('Cannot connect'), redis.exceptions.TimeoutError('Timed out')],
)
def test_decorator_transforms_redis_connection_error(error):
    """Ensure Redis connectivity errors are re-raised as DataStoreError."""
    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0.") as excinfo:
        DummyDAO(error).call()

    assert excinfo.value.__cause__ is error


def test_decorator_transforms_failed_redis_command():
    """Ensure failed Redis commands (e.g. OOM) are re-raised as DataStoreError."""
    error = redis.exceptions.ResponseError('OOM command not allowed when used memory > maxmemory')

    with pytest.raises(DataStoreError, match='Redis command failed: OOM command not allowed') as excinfo:
        DummyDAO(error).call()

    assert excinfo.value.__cause__ is error


def test_decorator_ignores_other_errors():
    with pytest.raises(ValueError):
        DummyDAO(ValueError('bad payload')).call()


# -------------------------------
# 3. Function metadata preservation
# -------------------------------


def test_decorator_preserves_function_metadata():
    """Ensure function name and docstring are preserved via functools.wraps."""

    @handle_redis_connection_error
    def sample_function():
        """This is a sample docstring."""
        return 'OK'

    assert sample_function.__name__ == 'sample_function'
    assert 'sample docstring' in sample_function.__doc__

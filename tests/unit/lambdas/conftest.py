import pytest


@pytest.fixture(autouse=True)
def _not_running_locally(monkeypatch):
    """Handlers answer unexpected errors with a generic 500 outside of SAM."""
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.delenv('APP_NAME', raising=False)


@pytest.fixture
def context():
    class _Context:
        function_name = 'test_function'

    return _Context()


@pytest.fixture
def config():
    return {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}}

"""Unit tests for remote log shipping in log_sink.py.

Test coverage includes:

1. RemoteLogClient registration and authentication
2. RemoteLogClient.log()
   - Sends entries with a bearer token.
   - Re-authenticates exactly once on 401.
   - Never raises on network failures.
3. RemoteLogHandler
   - Maps Python levels to remote levels and forwards records.
   - Swallows delivery failures.
   - Never forwards its own transport records.
   - Drops records once the queue is full.
"""

import logging
import threading
from unittest.mock import MagicMock

import pytest
import requests

from linkshortener.utils.log_sink import RemoteLogClient, RemoteLogHandler


# -------------------------------
# Fixtures
# -------------------------------


def _response(status_code=200, payload=None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.json.return_value = payload or {}
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return RemoteLogClient('http://logs.test/', client_id='client-id', client_secret='client-secret', session=session)


# -------------------------------
# 1. Registration and authentication
# -------------------------------


def test_register(session):
    session.post.return_value = _response(payload={'clientID': 'new-id', 'clientSecret': 'new-secret'})
    client = RemoteLogClient('http://logs.test', session=session)

    assert not client.is_registered
    assert client.register() is True
    assert client.is_registered
    assert client.client_id == 'new-id'
    session.post.assert_called_once_with('http://logs.test/evaluation-service/register', json={}, timeout=5.0)


def test_register_with_incomplete_response(session):
    session.post.return_value = _response(payload={'clientID': 'new-id'})
    client = RemoteLogClient('http://logs.test', session=session)

    assert client.register() is False
    assert not client.is_registered


def test_authenticate(client, session):
    session.post.return_value = _response(payload={'token': 'jwt-token'})

    assert client.authenticate() is True
    assert client.token == 'jwt-token'
    session.post.assert_called_once_with(
        'http://logs.test/evaluation-service/auth',
        json={'clientID': 'client-id', 'clientSecret': 'client-secret'},
        timeout=5.0,
    )


def test_authenticate_with_network_error(client, session):
    session.post.side_effect = requests.ConnectionError('unreachable')

    assert client.authenticate() is False
    assert not client.is_authenticated


# -------------------------------
# 2. RemoteLogClient.log()
# -------------------------------


def test_log(client, session):
    session.post.side_effect = [_response(payload={'token': 'jwt-token'}), _response(200)]

    assert client.log('warn', 'Shortcode already exists: abc123', 'linkshortener.services') is True

    _, kwargs = session.post.call_args
    assert session.post.call_args.args[0] == 'http://logs.test/evaluation-service/logs'
    assert kwargs['headers'] == {'Authorization': 'Bearer jwt-token'}
    assert kwargs['json']['level'] == 'warn'
    assert kwargs['json']['message'] == 'Shortcode already exists: abc123'
    assert kwargs['json']['package'] == 'linkshortener.services'
    assert kwargs['json']['stack'] is None


def test_log_reauthenticates_once_on_401(client, session):
    session.post.side_effect = [
        _response(payload={'token': 'expired'}),
        _response(401),
        _response(payload={'token': 'fresh'}),
        _response(200),
    ]

    assert client.log('info', 'message', 'pkg') is True
    assert session.post.call_count == 4
    assert session.post.call_args.kwargs['headers'] == {'Authorization': 'Bearer fresh'}


def test_log_gives_up_after_second_401(client, session):
    session.post.side_effect = [
        _response(payload={'token': 'expired'}),
        _response(401),
        _response(payload={'token': 'still-expired'}),
        _response(401),
    ]

    assert client.log('info', 'message', 'pkg') is False
    assert session.post.call_count == 4


def test_log_with_network_error(client, session):
    client.token = 'jwt-token'
    session.post.side_effect = requests.ConnectionError('unreachable')

    assert client.log('error', 'message', 'pkg') is False


def test_log_without_credentials_registers_first(session):
    session.post.side_effect = [
        _response(payload={'clientID': 'new-id', 'clientSecret': 'new-secret'}),
        _response(payload={'token': 'jwt-token'}),
        _response(200),
    ]
    client = RemoteLogClient('http://logs.test', session=session)

    assert client.log('info', 'message', 'pkg') is True
    assert session.post.call_count == 3


# -------------------------------
# 3. RemoteLogHandler
# -------------------------------


@pytest.mark.parametrize(
    'level, expected',
    [
        (logging.DEBUG, 'debug'),
        (logging.INFO, 'info'),
        (logging.WARNING, 'warn'),
        (logging.ERROR, 'error'),
        (logging.CRITICAL, 'fatal'),
    ],
)
def test_handler_forwards_records(level, expected):
    remote = MagicMock(spec=RemoteLogClient)
    handler = RemoteLogHandler(remote)
    record = logging.LogRecord('linkshortener.test', level, __file__, 1, 'hello %s', ('world',), None)

    handler.emit(record)
    handler.drain()

    remote.log.assert_called_once_with(expected, 'hello world', 'linkshortener.test', None)


def test_handler_swallows_delivery_errors():
    remote = MagicMock(spec=RemoteLogClient)
    remote.log.side_effect = RuntimeError('sink down')
    handler = RemoteLogHandler(remote)
    record = logging.LogRecord('linkshortener.test', logging.ERROR, __file__, 1, 'boom', (), None)

    handler.emit(record)
    handler.drain()
    handler.close()

    remote.log.assert_called_once()


@pytest.mark.parametrize('name', ['urllib3.connectionpool', 'requests', 'linkshortener.utils.log_sink'])
def test_handler_skips_transport_records(name):
    remote = MagicMock(spec=RemoteLogClient)
    handler = RemoteLogHandler(remote)
    record = logging.LogRecord(name, logging.DEBUG, __file__, 1, 'POST /evaluation-service/logs 200', (), None)

    handler.handle(record)
    handler.drain()
    handler.close()

    remote.log.assert_not_called()


def test_handler_skips_records_emitted_while_delivering():
    remote = MagicMock(spec=RemoteLogClient)
    handler = RemoteLogHandler(remote)

    def log(*args):
        # A real POST logs through urllib3 and friends on the worker thread
        if remote.log.call_count < 3:
            handler.handle(logging.LogRecord('linkshortener.dao', logging.DEBUG, __file__, 1, 'side effect', (), None))
        return True

    remote.log.side_effect = log
    handler.handle(logging.LogRecord('linkshortener.services', logging.INFO, __file__, 1, 'URL shortened successfully', (), None))
    handler.drain()
    handler.close()

    assert remote.log.call_count == 1


def test_handler_drops_records_when_queue_is_full():
    started, release = threading.Event(), threading.Event()
    remote = MagicMock(spec=RemoteLogClient)

    def log(*args):
        started.set()
        release.wait(timeout=5)
        return True

    remote.log.side_effect = log
    handler = RemoteLogHandler(remote, max_queue_size=2)
    record = logging.LogRecord('linkshortener.test', logging.INFO, __file__, 1, 'hello', (), None)

    handler.handle(record)
    assert started.wait(timeout=5)
    for _ in range(3):
        handler.handle(record)

    assert handler.dropped == 1
    assert handler.queue.qsize() == 2

    release.set()
    handler.drain()
    handler.close()

    assert remote.log.call_count == 3

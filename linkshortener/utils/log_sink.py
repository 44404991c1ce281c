"""Remote log shipping

The remote log service accepts `(level, message, package, stack)` entries
over HTTP behind a bearer token. Shipping is strictly best-effort: neither
the client nor the handler ever raise into application code.

Classes:
    RemoteLogClient:
        Register, authenticate and post log entries to the remote service.
    RemoteLogHandler:
        logging.Handler forwarding records to a RemoteLogClient on a
        background worker thread through a bounded queue (fire-and-forget).

Example:
    >>> client = RemoteLogClient('http://logs.internal', client_id='id', client_secret='secret')
    >>> logging.getLogger().addHandler(RemoteLogHandler(client))
    >>> logging.getLogger('linkshortener').warning('Shortcode already exists: abc123')
"""

import logging
import queue
import threading
import traceback
from datetime import datetime, UTC

import requests


__all__ = ['RemoteLogClient', 'RemoteLogHandler']

REGISTER_PATH = '/evaluation-service/register'
AUTH_PATH = '/evaluation-service/auth'
LOGS_PATH = '/evaluation-service/logs'

# Pending records beyond this are dropped
MAX_QUEUE_SIZE = 1000

# Loggers of the delivery path itself
TRANSPORT_LOGGERS = ('urllib3', 'requests', __name__)

# Python level names -> remote service level names
LEVELS = {
    'DEBUG': 'debug',
    'INFO': 'info',
    'WARNING': 'warn',
    'ERROR': 'error',
    'CRITICAL': 'fatal',
}


class RemoteLogClient:
    """HTTP client for the remote log service.

    Attributes:
        base_url (str):
            Base URL of the log service, e.g. 'http://20.244.56.144'.
        client_id (str | None), client_secret (str | None):
            Credentials. When missing, `register()` obtains them.
        token (str | None):
            Bearer token of the current session.
    """

    def __init__(
        self,
        base_url: str,
        client_id: str | None = None,
        client_secret: str | None = None,
        timeout: float = 5.0,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self.session = session or requests.Session()
        self.token = None
        self._lock = threading.Lock()

    @property
    def is_registered(self) -> bool:
        return bool(self.client_id and self.client_secret)

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def register(self) -> bool:
        """Obtain client credentials from the log service."""
        try:
            response = self.session.post(f'{self.base_url}{REGISTER_PATH}', json={}, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError):
            return False

        if not data.get('clientID') or not data.get('clientSecret'):
            return False
        self.client_id = data['clientID']
        self.client_secret = data['clientSecret']
        return True

    def authenticate(self) -> bool:
        """Exchange client credentials for a bearer token."""
        if not self.is_registered:
            return False

        self.token = None
        try:
            response = self.session.post(
                f'{self.base_url}{AUTH_PATH}',
                json={'clientID': self.client_id, 'clientSecret': self.client_secret},
                timeout=self.timeout,
            )
            response.raise_for_status()
            token = response.json().get('token')
        except (requests.RequestException, ValueError):
            return False

        self.token = token or None
        return self.is_authenticated

    def log(self, level: str, message: str, package: str, stack: str | None = None) -> bool:
        """Send one log entry.

        An expired token (401) triggers exactly one re-authentication and resend.

        Returns:
            bool: True if the service accepted the entry, False otherwise.
        """
        with self._lock:
            if not self.is_registered and not self.register():
                return False
            if not self.is_authenticated and not self.authenticate():
                return False

            entry = {
                'level': level,
                'message': message,
                'package': package,
                'timestamp': datetime.now(UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
                'stack': stack,
            }

            status = self._post(entry)
            if status == 401 and self.authenticate():
                status = self._post(entry)
            return status == 200

    def _post(self, entry: dict) -> int | None:
        try:
            response = self.session.post(
                f'{self.base_url}{LOGS_PATH}',
                json=entry,
                headers={'Authorization': f'Bearer {self.token}'},
                timeout=self.timeout,
            )
        except requests.RequestException:
            return None
        return response.status_code


class RemoteLogHandler(logging.Handler):
    """Forward log records to a RemoteLogClient without blocking the caller.

    Records are queued for a single background worker. The queue is bounded:
    when it is full the record is dropped and counted in `dropped`. The
    outcome of each delivery is discarded.

    Records of the HTTP transport (urllib3, requests, this module) and any
    record emitted from the worker thread itself are never forwarded, so a
    delivery can't trigger another delivery.
    """

    def __init__(self, client: RemoteLogClient, level: int = logging.NOTSET, max_queue_size: int = MAX_QUEUE_SIZE):
        super().__init__(level)
        self.client = client
        self.queue = queue.Queue(maxsize=max_queue_size)
        self.dropped = 0
        self.addFilter(self._is_forwardable)
        self.worker = threading.Thread(target=self._run, name='remote-log', daemon=True)
        self.worker.start()

    def _is_forwardable(self, record: logging.LogRecord) -> bool:
        if threading.current_thread() is self.worker:
            return False
        return not any(record.name == name or record.name.startswith(f'{name}.') for name in TRANSPORT_LOGGERS)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = LEVELS.get(record.levelname, 'info')
            message = record.getMessage()
            stack = ''.join(traceback.format_exception(*record.exc_info)) if record.exc_info else None
            self.queue.put_nowait((level, message, record.name, stack))
        except queue.Full:
            self.dropped += 1
        except Exception:
            self.handleError(record)

    def _run(self) -> None:
        while True:
            entry = self.queue.get()
            try:
                if entry is None:
                    return
                self._deliver(*entry)
            finally:
                self.queue.task_done()

    def _deliver(self, level: str, message: str, package: str, stack: str | None) -> None:
        try:
            self.client.log(level, message, package, stack)
        except Exception:  # noqa: S110
            pass

    def drain(self) -> None:
        """Block until every queued record has been delivered."""
        self.queue.join()

    def close(self) -> None:
        try:
            self.queue.put_nowait(None)
        except queue.Full:
            pass
        super().close()

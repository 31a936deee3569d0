"""Credentials of the active session."""

from __future__ import annotations

import threading
from typing import Optional

from nsgjob.domain import Credentials
from nsgjob.errors import NotConnectedError


class JobSession:
    """
    Holds at most one set of credentials.

    Several job operations may run concurrently on worker threads, so reads
    and writes go through a lock. The lock only covers copying the value in
    or out; callers must not hold it across network or disk I/O.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._credentials: Optional[Credentials] = None

    def store(self, credentials: Credentials) -> None:
        with self._lock:
            self._credentials = credentials

    def clear(self) -> None:
        with self._lock:
            self._credentials = None

    def current_credentials(self) -> Optional[Credentials]:
        with self._lock:
            return self._credentials

    def require_credentials(self) -> Credentials:
        """
        Return the stored credentials.

        Raises:
            NotConnectedError: If no credentials are stored
        """
        credentials = self.current_credentials()
        if credentials is None:
            raise NotConnectedError()
        return credentials

    def is_connected(self) -> bool:
        return self.current_credentials() is not None

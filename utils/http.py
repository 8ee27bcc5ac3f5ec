"""HTTP session utilities for the dashboard client.

Report fetches are user-driven: a failed request is shown to the user, who
presses "Go" again.  Sessions therefore pool connections but never retry.
"""

from typing import Optional

import requests
from requests.adapters import HTTPAdapter


class SessionManager:
    """Manages a pooled HTTP session without automatic retries."""

    def __init__(self, pool_connections: int = 10, pool_maxsize: int = 20,
                 headers: Optional[dict[str, str]] = None):
        """Initialize session manager.

        Args:
            pool_connections: Number of connection pools to cache
            pool_maxsize: Maximum number of connections per pool
            headers: Default headers sent with every request
        """
        self.pool_connections = pool_connections
        self.pool_maxsize = pool_maxsize
        self.headers = dict(headers or {})
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create the pooled HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.headers)

            adapter = HTTPAdapter(
                max_retries=0,
                pool_connections=self.pool_connections,
                pool_maxsize=self.pool_maxsize
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)

        return self._session

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

"""
Process-wide Langfuse client for chat request tracing.

The client is created once at startup from ``LANGFUSE_*`` settings. When
credentials are absent or the server rejects them, the client stays
disabled and every request runs untraced.
"""

import logging
from typing import Optional

from langfuse import Langfuse

logger = logging.getLogger(__name__)


class TracingClient:
    """Holds the Langfuse client, or the reason there is none."""

    def __init__(
        self,
        public_key: str = "",
        secret_key: str = "",
        host: str = "",
        debug: bool = False,
    ):
        self._client: Optional[Langfuse] = None
        self._error: Optional[str] = None

        if not (public_key and secret_key):
            self._error = "Langfuse credentials not configured"
            logger.debug(f"Tracing disabled: {self._error}")
            return

        options = {"public_key": public_key, "secret_key": secret_key, "debug": debug}
        if host:
            options["host"] = host

        try:
            candidate = Langfuse(**options)
        except Exception as e:
            self._error = f"Failed to initialize Langfuse client: {e}"
            logger.warning(f"Tracing disabled: {self._error}")
            return

        try:
            authorized = candidate.auth_check()
        except Exception as e:
            self._error = f"Langfuse auth_check raised: {e}"
        else:
            if not authorized:
                self._error = f"Langfuse auth_check rejected credentials for {host or 'default host'}"

        if self._error:
            logger.warning(f"Tracing disabled: {self._error}")
            return

        self._client = candidate
        logger.info(f"Tracing chat requests to Langfuse ({host or 'default host'})")

    @property
    def enabled(self) -> bool:
        return self._client is not None

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def client(self) -> Optional[Langfuse]:
        return self._client

    def flush(self) -> None:
        """Send buffered observations without closing the client."""
        if self._client is None:
            return
        try:
            self._client.flush()
        except Exception as e:
            logger.warning(f"Failed to flush traces: {e}")

    def shutdown(self) -> None:
        if self._client is None:
            return
        try:
            self._client.shutdown()
        except Exception as e:
            logger.warning(f"Langfuse shutdown failed: {e}")


_tracing_client: Optional[TracingClient] = None


def init_tracing_client(
    public_key: str = "",
    secret_key: str = "",
    host: str = "",
    debug: bool = False,
) -> TracingClient:
    """Create the process-wide client, replacing any earlier one."""
    global _tracing_client
    _tracing_client = TracingClient(public_key, secret_key, host, debug)
    return _tracing_client


def get_tracing_client() -> Optional[TracingClient]:
    return _tracing_client


def shutdown_tracing() -> None:
    """Flush and drop the process-wide client."""
    global _tracing_client
    if _tracing_client is not None:
        _tracing_client.shutdown()
    _tracing_client = None

"""Line-oriented TCP transport for the management interface."""

import socket
import time
from typing import Optional

from .exceptions import ConnectError, ProtocolError, TimeoutError
from ..logging_utility import logger


class LineTransport:
    """
    Blocking duplex text stream over a connected socket.

    Reads are buffered; every line returned ends with a single ``\\n`` (``\\r\\n``
    from the daemon is normalised). Reads take an absolute ``deadline`` taken
    from ``time.monotonic()``.
    """

    def __init__(self, sock: socket.socket, timeout: float, encoding: str = "utf-8"):
        self._sock: Optional[socket.socket] = sock
        self.timeout = timeout
        self.encoding = encoding
        self._buffer = b""

    @classmethod
    def connect(cls, host: str, port: int, timeout: float) -> 'LineTransport':
        """Open a TCP connection to the management endpoint."""
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except socket.timeout as e:
            raise ConnectError(f"Timed out connecting to {host}:{port}") from e
        except OSError as e:
            raise ConnectError(f"Cannot connect to {host}:{port}: {e}") from e
        sock.settimeout(timeout)
        logger.info(f"Connected to management interface at {host}:{port}")
        return cls(sock, timeout)

    @property
    def closed(self) -> bool:
        return self._sock is None

    def write_line(self, text: str) -> None:
        if self._sock is None:
            raise ProtocolError("Transport is closed")
        try:
            self._sock.sendall((text + "\n").encode(self.encoding))
        except OSError as e:
            raise ProtocolError(f"Write failed: {e}") from e

    def read_line(self, deadline: float) -> str:
        """Read one line, blocking until it is complete or the deadline passes."""
        while b"\n" not in self._buffer:
            self._fill(deadline)
        line, self._buffer = self._buffer.split(b"\n", 1)
        return line.rstrip(b"\r").decode(self.encoding, errors="replace") + "\n"

    def read_until(self, marker: str, deadline: float) -> str:
        """Read up to and including ``marker``, which need not end a line."""
        needle = marker.encode(self.encoding)
        while needle not in self._buffer:
            self._fill(deadline)
        head, self._buffer = self._buffer.split(needle, 1)
        return (head + needle).decode(self.encoding, errors="replace")

    def _fill(self, deadline: float) -> None:
        sock = self._sock
        if sock is None:
            raise ProtocolError("Transport is closed")
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise TimeoutError("Timed out waiting for management interface")
        try:
            sock.settimeout(remaining)
            chunk = sock.recv(4096)
        except socket.timeout as e:
            raise TimeoutError("Timed out waiting for management interface") from e
        except OSError as e:
            raise ProtocolError(f"Read failed: {e}") from e
        if not chunk:
            raise ProtocolError("Connection closed by management interface")
        self._buffer += chunk

    def close(self) -> None:
        """Close the socket, waking any read blocked on it."""
        sock = self._sock
        if sock is None:
            return
        try:
            # close() alone does not interrupt a recv() in another thread
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        try:
            sock.close()
        finally:
            self._sock = None
            self._buffer = b""

"""Management interface session implementation."""

import time
from typing import Callable, Optional, Union

from .command_factory import ManagementCommandFactory
from .exceptions import (
    AuthError,
    ManagementError,
    ProtocolError,
    RemoteError,
    TimeoutError,
)
from .models import CommandResult, StatsSnapshot, StatusReport
from .parsers import parse_stats, parse_status
from .transport import LineTransport
from .utils import END_PREFIX, ERROR_PREFIX, SUCCESS_PREFIX, classify_response, read_response
from ..logging_utility import logger


PASSWORD_PROMPT = "ENTER PASSWORD:"

Connector = Callable[[str, int, float], LineTransport]


class ManagementSession:
    """
    One live connection to an OpenVPN management endpoint.

    Not safe for concurrent use: exactly one command may be in flight. After a
    timeout or protocol error the session is unusable and must be closed and
    reopened.
    """

    def __init__(self, transport, host: str, port: int, timeout: float):
        self._transport = transport
        self.host = host
        self.port = port
        self.timeout = timeout
        self.authenticated = False
        self._closed = False
        self._broken = False

    @classmethod
    def open(
            cls,
            host: str = "localhost",
            port: int = 1194,
            timeout: float = 10,
            password: Optional[str] = None,
            connector: Connector = LineTransport.connect,
    ) -> 'ManagementSession':
        """
        Connect to the management endpoint and log in if a password is given.

        Args:
            host: Management host
            port: Management port
            timeout: Seconds allowed for connecting and for each reply
            password: Management password, None when the interface has none
            connector: Factory returning a transport for (host, port, timeout)

        Returns:
            Open ManagementSession

        Raises:
            ConnectError: Endpoint unreachable
            AuthError: Password prompt missing or password rejected
        """
        transport = connector(host, port, timeout)
        session = cls(transport, host, port, timeout)
        if password is not None:
            try:
                session._login(password)
            except AuthError:
                transport.close()
                raise
        return session

    def _login(self, password: str) -> None:
        deadline = time.monotonic() + self.timeout
        try:
            self._transport.read_until(PASSWORD_PROMPT, deadline)
        except (TimeoutError, ProtocolError) as e:
            logger.error(f"No password prompt from {self.host}:{self.port}: {e}")
            raise AuthError(f"Password prompt not received: {e}") from e

        try:
            self._transport.write_line(password)
            reply = self._transport.read_line(deadline).strip()
        except (TimeoutError, ProtocolError) as e:
            logger.error(f"Login to {self.host}:{self.port} failed: {e}")
            raise AuthError(f"Login not confirmed: {e}") from e

        if not reply.startswith(SUCCESS_PREFIX):
            logger.error(f"Login to {self.host}:{self.port} rejected: {reply}")
            raise AuthError(f"Login rejected: {reply}")

        self.authenticated = True
        logger.info(f"Authenticated to {self.host}:{self.port}")

    def close(self) -> None:
        """Release the transport. Closing twice is an error."""
        if self._closed:
            raise ManagementError("Session already closed")
        self._closed = True
        self._transport.close()
        logger.info(f"Closed management session to {self.host}:{self.port}")

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> 'ManagementSession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if not self._closed:
            self.close()

    def issue(self, command: str) -> CommandResult:
        """
        Send one command and classify the reply.

        Returns:
            CommandResult; errors reported by the daemon are returned, not raised
        """
        if self._closed:
            raise ManagementError("Session is closed")
        if self._broken:
            raise ProtocolError("Session is in an indeterminate state; close and reopen it")

        logger.info(f"> {command}")
        try:
            self._transport.write_line(command)
            lines = read_response(self._transport, self.timeout)
        except (TimeoutError, ProtocolError) as e:
            self._broken = True
            logger.error(f"Command '{command}' failed: {e}")
            raise

        result = classify_response(lines)
        if result.is_error:
            logger.warning(f"Command '{command}' returned error: {result.text}")
        return result

    def _checked(self, command: str) -> CommandResult:
        result = self.issue(command)
        if result.is_error:
            raise RemoteError(result.text)
        # ERROR: with no message still means the command failed
        if result.is_raw and result.lines[-1].startswith(ERROR_PREFIX):
            raise RemoteError(result.lines[-1][len(ERROR_PREFIX):].strip())
        return result

    def _text(self, command: str) -> str:
        result = self._checked(command)
        if result.is_success:
            return result.text
        body = [line for line in result.lines if not line.startswith(END_PREFIX)]
        return "".join(body).rstrip("\n")

    def status(self) -> StatusReport:
        """Get connected clients and routing table."""
        result = self._checked(ManagementCommandFactory.status())
        if not result.is_raw:
            raise ProtocolError(f"Unexpected single-line reply to status: {result.text}")
        return parse_status(result.lines)

    def stats(self) -> StatsSnapshot:
        """Get number of connected clients and traffic counters."""
        result = self._checked(ManagementCommandFactory.load_stats())
        if not result.is_success:
            raise ProtocolError(f"Unexpected reply to load-stats: {result.text!r}")
        return parse_stats(result.text)

    def version(self) -> str:
        """Daemon and management interface version."""
        return self._text(ManagementCommandFactory.version())

    def pid(self) -> str:
        """Process ID of the daemon, as reported (``pid=<n>``)."""
        return self._text(ManagementCommandFactory.pid())

    def signal(self, kind: str) -> str:
        """Send SIGHUP, SIGTERM, SIGUSR1 or SIGUSR2 to the daemon."""
        return self._text(ManagementCommandFactory.signal(kind))

    def verb(self, level: Optional[int] = None) -> str:
        """Set log verbosity, or show it when level is None."""
        return self._text(ManagementCommandFactory.verb(level))

    def mute(self, level: Optional[int] = None) -> str:
        """Set log mute level, or show it when level is None."""
        return self._text(ManagementCommandFactory.mute(level))

    def kill(
            self,
            common_name: Optional[str] = None,
            host: Optional[str] = None,
            port: Optional[Union[int, str]] = None,
    ) -> str:
        """Kill client instance(s) by common name or by host:port."""
        return self._text(ManagementCommandFactory.kill(common_name, host, port))

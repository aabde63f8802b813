"""Factory for creating management interface commands."""

from typing import Optional, Union
from .commands import (
    STATUS,
    LOAD_STATS,
    VERSION,
    PID,
    SIGNAL,
    VERB,
    MUTE,
    KILL,
    Command,
)
from .exceptions import InvalidArgument


def _level(command: Command, level: Optional[int]) -> str:
    if level is None:
        return command.build()
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidArgument(f"Level for {command.base_cmd[0]} must be an integer, got {level!r}")
    if level < 0:
        raise InvalidArgument(f"Level for {command.base_cmd[0]} must be non-negative, got {level}")
    return command.with_arg(str(level)).build()


class ManagementCommandFactory:
    """Factory for creating management interface commands."""

    @staticmethod
    def status() -> str:
        """Create client list / routing table report command."""
        return STATUS.build()

    @staticmethod
    def load_stats() -> str:
        """Create aggregate counters command."""
        return LOAD_STATS.build()

    @staticmethod
    def version() -> str:
        """Create version command."""
        return VERSION.build()

    @staticmethod
    def pid() -> str:
        """Create pid command."""
        return PID.build()

    @staticmethod
    def signal(kind: str) -> str:
        """Create signal command, kind being one of SIGHUP, SIGTERM, SIGUSR1, SIGUSR2."""
        return SIGNAL.with_arg(kind).build()

    @staticmethod
    def verb(level: Optional[int] = None) -> str:
        """Create command setting log verbosity, or querying it when level is None."""
        return _level(VERB, level)

    @staticmethod
    def mute(level: Optional[int] = None) -> str:
        """Create command setting log mute level, or querying it when level is None."""
        return _level(MUTE, level)

    @staticmethod
    def kill(
            common_name: Optional[str] = None,
            host: Optional[str] = None,
            port: Optional[Union[int, str]] = None,
    ) -> str:
        """Create kill command by common name, or by host + port; exactly one of the two."""
        if common_name is not None:
            if host is not None or port is not None:
                raise InvalidArgument("Give either common_name or host + port, not both")
            return KILL.with_arg(common_name).build()

        if host is None or port is None:
            raise InvalidArgument("common_name or host + port combination needed")

        if isinstance(port, bool):
            raise InvalidArgument(f"Invalid port '{port}'. Expected int")
        try:
            port_number = int(port)
        except (TypeError, ValueError):
            raise InvalidArgument(f"Invalid port '{port}'. Expected int")
        if not 0 < port_number < 65536:
            raise InvalidArgument(f"Port out of range: {port}")

        return KILL.with_arg(f"{host}:{port_number}").build()

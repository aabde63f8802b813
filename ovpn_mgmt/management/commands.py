"""Command templates and builders for the management interface."""

from typing import List, Optional, Tuple
from dataclasses import dataclass

from .exceptions import InvalidArgument


SIGNALS = ("SIGHUP", "SIGTERM", "SIGUSR1", "SIGUSR2")


def _quote(arg: str) -> str:
    """Quote an argument the way the daemon's command parser expects."""
    if not any(ch.isspace() or ch in '"\\' for ch in arg):
        return arg
    escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass
class Command:
    """Command builder with validation."""
    base_cmd: List[str]
    _valid_values: Optional[Tuple[str, ...]] = None

    def _validate_arg(self, arg: str) -> None:
        """Validate an argument against injection and the allowed values, if any."""
        if not arg:
            raise InvalidArgument(f"Empty argument for command {self.base_cmd[0]}")

        # A line break would start a second command on the wire
        if any(ord(ch) < 0x20 or ord(ch) == 0x7f for ch in arg):
            raise InvalidArgument(
                f"Invalid argument {arg!r} for command {self.base_cmd[0]}: "
                f"control characters are not allowed"
            )

        if self._valid_values is not None and arg not in self._valid_values:
            valid = ", ".join(self._valid_values)
            raise InvalidArgument(
                f"Unsupported argument '{arg}' for command {self.base_cmd[0]}. "
                f"Supported values are: {valid}"
            )

    def _validate_executable(self) -> None:
        """Validate that base command exists."""
        if not self.base_cmd:
            raise InvalidArgument("Command cannot be empty")

    @classmethod
    def from_str(cls, cmd: str, valid_values: Optional[Tuple[str, ...]] = None) -> 'Command':
        """Create command from string with optional set of accepted arguments."""
        command = cls(cmd.split(), valid_values)
        command._validate_executable()
        return command

    def with_arg(self, arg: str) -> 'Command':
        """Add single validated argument."""
        arg = str(arg)
        self._validate_arg(arg)
        return Command(self.base_cmd + [_quote(arg)], None)

    def build(self) -> str:
        """Get final command line (without line terminator)."""
        self._validate_executable()
        return " ".join(self.base_cmd)


STATUS = Command.from_str("status")
LOAD_STATS = Command.from_str("load-stats")
VERSION = Command.from_str("version")
PID = Command.from_str("pid")

SIGNAL = Command.from_str("signal", valid_values=SIGNALS)

VERB = Command.from_str("verb")
MUTE = Command.from_str("mute")

KILL = Command.from_str("kill")

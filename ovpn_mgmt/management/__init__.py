"""OpenVPN management interface client."""

from .command_factory import ManagementCommandFactory
from .exceptions import (
    AuthError,
    ConfigurationError,
    ConnectError,
    InvalidArgument,
    ManagementError,
    ParseError,
    ProtocolError,
    RemoteError,
    TimeoutError,
)
from .models import (
    ClientRecord,
    CommandResult,
    ResultKind,
    RouteRecord,
    StatsSnapshot,
    StatusReport,
)
from .parsers import parse_stats, parse_status
from .session import ManagementSession
from .transport import LineTransport

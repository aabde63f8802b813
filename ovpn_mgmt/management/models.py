"""Data models for the management interface."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple


class ResultKind(Enum):
    """Classification of a command reply"""
    SUCCESS = "success"
    ERROR = "error"
    RAW = "raw"


@dataclass(frozen=True)
class CommandResult:
    """One classified reply: Success(payload), Error(message) or Raw(block)."""
    kind: ResultKind
    text: str
    lines: Tuple[str, ...] = ()

    @classmethod
    def success(cls, payload: str, lines: Tuple[str, ...] = ()) -> 'CommandResult':
        return cls(ResultKind.SUCCESS, payload, tuple(lines))

    @classmethod
    def error(cls, message: str, lines: Tuple[str, ...] = ()) -> 'CommandResult':
        return cls(ResultKind.ERROR, message, tuple(lines))

    @classmethod
    def raw(cls, lines: Tuple[str, ...]) -> 'CommandResult':
        return cls(ResultKind.RAW, "".join(lines), tuple(lines))

    @property
    def is_success(self) -> bool:
        return self.kind is ResultKind.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.kind is ResultKind.ERROR

    @property
    def is_raw(self) -> bool:
        return self.kind is ResultKind.RAW


@dataclass(frozen=True)
class ClientRecord:
    """Connected peer from the CLIENT LIST section"""
    common_name: str
    real_address: str
    bytes_received: str
    bytes_sent: str
    connected_since: str

    def as_dict(self) -> Dict[str, str]:
        return {
            "real_address": self.real_address,
            "bytes_received": self.bytes_received,
            "bytes_sent": self.bytes_sent,
            "connected_since": self.connected_since,
        }


@dataclass(frozen=True)
class RouteRecord:
    """Routing table entry"""
    virtual_address: str
    common_name: str
    real_address: str
    last_ref: str

    def as_dict(self) -> Dict[str, str]:
        return {
            "common_name": self.common_name,
            "real_address": self.real_address,
            "last_ref": self.last_ref,
        }


@dataclass(frozen=True)
class StatusReport:
    """
    Parsed output of the ``status`` command.

    ``clients`` maps a common name to every connection using it, in report
    order. ``routes`` maps a virtual address to its (last seen) route.
    Both mappings are read-only views.
    """
    clients: Mapping[str, Tuple[ClientRecord, ...]] = field(
        default_factory=lambda: MappingProxyType({}))
    routes: Mapping[str, RouteRecord] = field(
        default_factory=lambda: MappingProxyType({}))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "clients": {
                name: [record.as_dict() for record in records]
                for name, records in self.clients.items()
            },
            "routes": {
                address: route.as_dict()
                for address, route in self.routes.items()
            },
        }


@dataclass(frozen=True)
class StatsSnapshot:
    """Counters from ``load-stats``"""
    clients: int
    bytes_download: int
    bytes_upload: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "clients": self.clients,
            "bytes_download": self.bytes_download,
            "bytes_upload": self.bytes_upload,
        }

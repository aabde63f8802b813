"""Parsers for the ``status`` and ``load-stats`` replies."""

from types import MappingProxyType
from typing import Dict, List, Sequence

from .exceptions import ParseError
from .models import ClientRecord, RouteRecord, StatsSnapshot, StatusReport


CLIENT_LIST_HEADER = "Common Name,Real Address,Bytes Received,Bytes Sent,Connected Since"
ROUTING_TABLE_HEADER = "Virtual Address,Common Name,Real Address,Last Ref"
ROUTING_TABLE_MARKER = "ROUTING TABLE"
GLOBAL_STATS_MARKER = "GLOBAL STATS"

STATS_PREFIXES = ("nclients=", "bytesin=", "bytesout=")


def _split(line: str, text: str, count: int, section: str) -> List[str]:
    fields = text.split(",")
    if len(fields) != count:
        raise ParseError(
            f"Malformed {section} line (expected {count} fields, got {len(fields)}): {line!r}",
            line=line,
        )
    return fields


def parse_status(lines: Sequence[str]) -> StatusReport:
    """
    Parse the block returned by ``status``.

    The report is flat text split into sections by literal marker lines:
    the client list runs from its header to ``ROUTING TABLE``, the routing
    table from its header to ``GLOBAL STATS``. Anything outside those two
    sections is ignored.

    Args:
        lines: Reply lines, terminators included

    Returns:
        StatusReport with clients grouped by common name and routes keyed
        by virtual address

    Raises:
        ParseError: A line inside a section has the wrong number of fields
    """
    clients: Dict[str, List[ClientRecord]] = {}
    routes: Dict[str, RouteRecord] = {}
    in_clients = False
    in_routes = False

    for line in lines:
        text = line.rstrip("\r\n")

        # End markers
        if text == ROUTING_TABLE_MARKER:
            in_clients = False
        if text == GLOBAL_STATS_MARKER:
            in_routes = False

        if in_clients:
            name, real_address, received, sent, since = _split(line, text, 5, "client list")
            clients.setdefault(name, []).append(
                ClientRecord(name, real_address, received, sent, since)
            )

        if in_routes:
            virtual_address, name, real_address, last_ref = _split(line, text, 4, "routing table")
            routes[virtual_address] = RouteRecord(virtual_address, name, real_address, last_ref)

        # Start markers, effective from the next line
        if text == CLIENT_LIST_HEADER:
            in_clients = True
        if text == ROUTING_TABLE_HEADER:
            in_routes = True

    return StatusReport(
        clients=MappingProxyType({name: tuple(records) for name, records in clients.items()}),
        routes=MappingProxyType(routes),
    )


def parse_stats(payload: str) -> StatsSnapshot:
    """
    Parse the ``load-stats`` payload ``nclients=<n>,bytesin=<n>,bytesout=<n>``.

    Exactly three positional fields; each must carry its prefix followed by
    plain decimal digits.
    """
    fields = payload.rstrip("\r\n").split(",")
    if len(fields) != len(STATS_PREFIXES):
        raise ParseError(f"Malformed load-stats payload: {payload!r}", line=payload)

    values = []
    for prefix, item in zip(STATS_PREFIXES, fields):
        if not item.startswith(prefix):
            raise ParseError(f"Expected '{prefix}' in load-stats payload: {payload!r}", line=payload)
        digits = item[len(prefix):]
        # int() alone would also take signs, underscores and padding
        if not (digits.isascii() and digits.isdigit()):
            raise ParseError(f"Non-numeric counter '{item}' in load-stats payload", line=payload)
        values.append(int(digits))

    clients, bytes_in, bytes_out = values
    return StatsSnapshot(clients=clients, bytes_download=bytes_in, bytes_upload=bytes_out)

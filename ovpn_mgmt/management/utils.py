"""Utility functions for reading and classifying management replies."""

import time
from typing import List, Sequence

from .models import CommandResult
from ..logging_utility import logger


SUCCESS_PREFIX = "SUCCESS:"
ERROR_PREFIX = "ERROR:"
END_PREFIX = "END"
NOTIFICATION_PREFIX = ">"

TERMINATORS = (SUCCESS_PREFIX, ERROR_PREFIX, END_PREFIX)


def is_terminator(line: str) -> bool:
    """Whether ``line`` ends a command reply."""
    return line.startswith(TERMINATORS)


def read_response(transport, timeout: float) -> List[str]:
    """
    Read one command reply from the transport.

    Args:
        transport: Open transport providing ``read_line(deadline)``
        timeout: Seconds allowed for the whole reply

    Returns:
        Every line read, in order, terminator line included

    Raises:
        TimeoutError: No terminator line before the deadline
        ProtocolError: Stream closed before a terminator line
    """
    deadline = time.monotonic() + timeout
    lines: List[str] = []
    while True:
        line = transport.read_line(deadline)
        # Real-time notifications can interleave with replies
        if line.startswith(NOTIFICATION_PREFIX):
            logger.debug(f"Dropping notification: {line.rstrip()}")
            continue
        logger.debug(f"< {line.rstrip()}")
        lines.append(line)
        if is_terminator(line):
            return lines


def _payload(line: str, prefix: str) -> str:
    """Text after ``prefix`` and a single space, or empty if the line doesn't match."""
    marker = prefix + " "
    if not line.startswith(marker):
        return ""
    return line[len(marker):].rstrip("\r\n")


def classify_response(lines: Sequence[str]) -> CommandResult:
    """
    Classify a reply by its terminator line.

    ``ERROR: <msg>`` gives an error result, ``SUCCESS: <msg>`` a success
    result; anything else (for instance a report ending in ``END``) is kept
    raw with every line.
    """
    block = tuple(lines)
    terminator = block[-1] if block else ""

    message = _payload(terminator, ERROR_PREFIX)
    if message:
        return CommandResult.error(message, block)

    payload = _payload(terminator, SUCCESS_PREFIX)
    if payload:
        return CommandResult.success(payload, block)

    return CommandResult.raw(block)

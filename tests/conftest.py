import os
import tempfile
from typing import Dict, List, Optional

import pytest

# Keep test logs out of the source tree; must be set before the logger is created
os.environ.setdefault("OVPN_MGMT_LOG_DIR", tempfile.mkdtemp(prefix="ovpn-mgmt-logs-"))

from ovpn_mgmt.management.exceptions import ProtocolError  # noqa: E402


STATUS_REPORT = (
    "OpenVPN CLIENT LIST\r\n"
    "Updated,Thu Jan  1 00:00:10 1970\r\n"
    "Common Name,Real Address,Bytes Received,Bytes Sent,Connected Since\r\n"
    "foo,1.2.3.4:5,100,200,Thu Jan  1 00:00:00 1970\r\n"
    "bar,5.6.7.8:1194,300,400,Thu Jan  1 00:00:02 1970\r\n"
    "foo,1.2.3.9:6,500,600,Thu Jan  1 00:00:03 1970\r\n"
    "ROUTING TABLE\r\n"
    "Virtual Address,Common Name,Real Address,Last Ref\r\n"
    "10.8.0.2,foo,1.2.3.4:5,Thu Jan 1 00:00:01 1970\r\n"
    "10.8.0.3,bar,5.6.7.8:1194,Thu Jan 1 00:00:04 1970\r\n"
    "GLOBAL STATS\r\n"
    "Max bcast/mcast queue length,0\r\n"
    "END\r\n"
)


class FakeTransport:
    """
    Scripted in-memory transport.

    ``script`` maps a command line to the text the daemon sends back once the
    command is written. When the buffer runs dry, reads raise ``exhausted``
    (stream closed by default).
    """

    def __init__(self, script: Optional[Dict[str, str]] = None, greeting: str = "",
                 exhausted: type = ProtocolError):
        self.script = dict(script or {})
        self.buffer = greeting
        self.exhausted = exhausted
        self.written: List[str] = []
        self.closed = False

    def write_line(self, text: str) -> None:
        if self.closed:
            raise ProtocolError("Transport is closed")
        self.written.append(text)
        self.buffer += self.script.get(text, "")

    def read_line(self, deadline: float) -> str:
        if "\n" not in self.buffer:
            raise self.exhausted("no more data")
        line, self.buffer = self.buffer.split("\n", 1)
        return line.rstrip("\r") + "\n"

    def read_until(self, marker: str, deadline: float) -> str:
        if marker not in self.buffer:
            raise self.exhausted("no more data")
        head, self.buffer = self.buffer.split(marker, 1)
        return head + marker

    def close(self) -> None:
        self.closed = True


def connector_for(transport: FakeTransport):
    def connect(host, port, timeout):
        return transport
    return connect


@pytest.fixture
def status_report() -> str:
    return STATUS_REPORT


@pytest.fixture
def status_lines() -> List[str]:
    return [line.rstrip("\r") + "\n" for line in STATUS_REPORT.split("\n") if line]


DAEMON_SCRIPT = {
    "status": STATUS_REPORT,
    "load-stats": "SUCCESS: nclients=3,bytesin=1000,bytesout=2000\r\n",
    "version": (
        "OpenVPN Version: OpenVPN 2.6.8 x86_64-pc-linux-gnu\r\n"
        "Management Version: 5\r\n"
        "END\r\n"
    ),
    "pid": "SUCCESS: pid=4242\r\n",
    "signal SIGHUP": "SUCCESS: signal SIGHUP thrown\r\n",
    "verb": "SUCCESS: verb=3\r\n",
    "verb 4": "SUCCESS: verb level changed\r\n",
    "mute": "SUCCESS: mute=0\r\n",
    "mute 10": "SUCCESS: mute level changed\r\n",
    "kill foo": "SUCCESS: common name 'foo' found, 2 client(s) killed\r\n",
    "kill 1.2.3.4:5": "SUCCESS: 1 client(s) at address 1.2.3.4:5 killed\r\n",
    "kill nobody": "ERROR: common name 'nobody' not found\r\n",
}

GREETING = ">INFO:OpenVPN Management Interface Version 5 -- type 'help' for more info\r\n"


def scripted_transport() -> FakeTransport:
    return FakeTransport(script=DAEMON_SCRIPT, greeting=GREETING)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return scripted_transport()


@pytest.fixture
def transport_factory():
    """Connector handing out a fresh scripted transport per connection; ``opened`` lists them."""
    opened: List[FakeTransport] = []

    def connect(host, port, timeout):
        transport = scripted_transport()
        opened.append(transport)
        return transport

    connect.opened = opened
    return connect


@pytest.fixture
def session(fake_transport):
    from ovpn_mgmt.management.session import ManagementSession
    return ManagementSession.open(connector=connector_for(fake_transport))

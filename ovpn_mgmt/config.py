"""Management endpoint configuration."""

import configparser
import os
from dataclasses import dataclass
from typing import Optional

from .management.exceptions import ConfigurationError


DEFAULT_CONFIG_PATH = "config/ovpn_mgmt.conf"
SECTION = "management"


@dataclass(frozen=True)
class ManagementConfig:
    host: str = "localhost"
    port: int = 1194
    timeout: float = 10.0
    password: Optional[str] = None


def config_path() -> str:
    return os.environ.get("OVPN_MGMT_CONFIG", DEFAULT_CONFIG_PATH)


def load_config(path: Optional[str] = None) -> ManagementConfig:
    """
    Load endpoint settings from an INI file.

    A missing file or section gives the defaults. An empty password means
    the interface has no login.
    """
    parser = configparser.ConfigParser()
    parser.read(path or config_path())
    if not parser.has_section(SECTION):
        return ManagementConfig()

    section = parser[SECTION]
    defaults = ManagementConfig()
    try:
        port = section.getint("port", fallback=defaults.port)
        timeout = section.getfloat("timeout", fallback=defaults.timeout)
    except ValueError as e:
        raise ConfigurationError(f"Invalid management configuration: {str(e)}")

    if not 0 < port < 65536:
        raise ConfigurationError(f"Invalid management port: {port}")
    if timeout <= 0:
        raise ConfigurationError(f"Invalid management timeout: {timeout}")

    return ManagementConfig(
        host=section.get("host", fallback=defaults.host) or defaults.host,
        port=port,
        timeout=timeout,
        password=section.get("password", fallback="") or None,
    )

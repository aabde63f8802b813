"""Client for the OpenVPN management interface."""

__version__ = "0.9.5"

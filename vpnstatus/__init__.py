"""
VPNStatus - VPN detection and public location monitor.

Detects active VPN tunnels from the host's network interfaces, follows
network path changes and reports the public IP location reached through
the tunnel.
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Make key components available at package level
from . import config, logging_config
from .models import ConnectivityStatus, LocationInfo, MonitorSnapshot
from .monitor import Monitor, get_status

__all__ = [
    "config",
    "logging_config",
    "ConnectivityStatus",
    "LocationInfo",
    "MonitorSnapshot",
    "Monitor",
    "get_status",
]

"""
Network module for VPNStatus.

This module handles the host side of VPN detection:
- Interface enumeration (psutil)
- VPN interface classification
- Network path change notifications (SystemConfiguration)
"""

from .interfaces import InterfaceEnumerationError, get_interface_snapshot
from .classifier import classify, get_active_vpn_interfaces, is_vpn_interface
from .path_monitor import PathChangeSource, PathSubscription

__all__ = [
    "InterfaceEnumerationError",
    "get_interface_snapshot",
    "classify",
    "get_active_vpn_interfaces",
    "is_vpn_interface",
    "PathChangeSource",
    "PathSubscription",
]

"""
Network interface enumeration for VPNStatus.

This module turns the live OS interface table into an owned, immutable
InterfaceSnapshot. It uses psutil so the same code runs on macOS and Linux.
"""

import socket

import psutil

from ..logging_config import get_logger
from ..models import InterfaceDescriptor

# Get module logger
logger = get_logger(__name__)


class InterfaceEnumerationError(Exception):
    """Raised when the OS interface table cannot be read."""


def _parse_flags(stats):
    """
    Return (is_up, is_running) for one psutil stats record.

    psutil reports the raw flag list as a comma-separated string on recent
    releases; older releases only expose isup.
    """
    flags = getattr(stats, "flags", None)
    if not flags:
        return stats.isup, stats.isup

    names = {flag.strip() for flag in flags.split(",")}
    return "up" in names, "running" in names


def get_interface_snapshot():
    """
    Capture the current interface table.

    Returns:
        tuple of InterfaceDescriptor, one per interface name, in the order
        psutil reports them

    Raises:
        InterfaceEnumerationError: if the OS call fails
    """
    try:
        addrs = psutil.net_if_addrs()
        stats = psutil.net_if_stats()
    except (OSError, psutil.Error) as e:
        raise InterfaceEnumerationError(f"Could not read interface table: {e}") from e

    snapshot = []
    for name, addr_list in addrs.items():
        iface_stats = stats.get(name)
        if iface_stats is not None:
            is_up, is_running = _parse_flags(iface_stats)
        else:
            is_up = is_running = False

        ipv4 = [addr.address for addr in addr_list if addr.family == socket.AF_INET]
        snapshot.append(
            InterfaceDescriptor(
                name=name,
                is_up=is_up,
                is_running=is_running,
                has_ipv4=bool(ipv4),
                addresses=tuple(ipv4),
            )
        )

    logger.debug(f"Enumerated {len(snapshot)} interfaces")
    return tuple(snapshot)

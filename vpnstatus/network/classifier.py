"""
VPN interface classification for VPNStatus.

An interface counts as a VPN tunnel when its name starts with a known tunnel
driver prefix and it is up, running and carries an IPv4 address. The IPv4
requirement excludes link-local-only tunnels such as the ones macOS creates
for iCloud Private Relay, which exist permanently but carry no VPN traffic.
"""

from .. import config
from ..logging_config import get_logger
from .interfaces import InterfaceEnumerationError, get_interface_snapshot

# Get module logger
logger = get_logger(__name__)


def matching_prefix(name, prefixes=config.VPN_INTERFACE_PREFIXES):
    """Return the first tunnel prefix ``name`` starts with, or None."""
    for prefix in prefixes:
        if name.startswith(prefix):
            return prefix
    return None


def is_vpn_interface(descriptor):
    """Check a single descriptor against the prefix and state rules."""
    if matching_prefix(descriptor.name) is None:
        return False
    return descriptor.is_up and descriptor.is_running and descriptor.has_ipv4


def classify(snapshot):
    """
    Return the sorted, duplicate-free names of VPN-like interfaces.

    Args:
        snapshot: iterable of InterfaceDescriptor

    Returns:
        tuple of interface names in lexicographic order
    """
    return tuple(sorted({d.name for d in snapshot if is_vpn_interface(d)}))


def get_active_vpn_interfaces(enumerate_interfaces=get_interface_snapshot):
    """
    Enumerate the live interface table and classify it.

    An unreadable interface table is indistinguishable from "nothing
    detected", so enumeration failures yield an empty result.
    """
    try:
        snapshot = enumerate_interfaces()
    except InterfaceEnumerationError as e:
        logger.warning(f"Interface enumeration failed, assuming no VPN: {e}")
        return ()

    interfaces = classify(snapshot)
    if interfaces:
        logger.debug(f"VPN interfaces detected: {', '.join(interfaces)}")
    else:
        logger.debug("No VPN interfaces detected")
    return interfaces

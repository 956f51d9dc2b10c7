"""
Unit tests for vpnstatus/network/classifier.py

Tests the prefix and interface state rules that decide what counts as a VPN.
"""

import pytest

from vpnstatus.models import ConnectivityStatus, InterfaceDescriptor
from vpnstatus.network.classifier import (
    classify,
    get_active_vpn_interfaces,
    is_vpn_interface,
    matching_prefix,
)
from vpnstatus.network.interfaces import InterfaceEnumerationError


def active(name):
    return InterfaceDescriptor(name=name, is_up=True, is_running=True, has_ipv4=True)


@pytest.mark.unit
class TestIsVpnInterface:
    """Tests for single-interface classification."""

    @pytest.mark.parametrize("name", ["utun3", "ppp0", "ipsec0", "tap0", "tun0", "gpd0", "wg0"])
    def test_known_prefixes_qualify(self, name):
        assert is_vpn_interface(active(name))

    @pytest.mark.parametrize("name", ["eth0", "en0", "lo0", "bridge100", "awdl0", "vmnet1"])
    def test_other_names_never_qualify(self, name):
        assert not is_vpn_interface(active(name))

    def test_tun_with_ipv4_qualifies(self):
        assert is_vpn_interface(InterfaceDescriptor("tun0", is_up=True, is_running=True, has_ipv4=True))

    def test_tun_with_only_ipv6_link_local_does_not_qualify(self, private_relay_interface):
        assert not is_vpn_interface(InterfaceDescriptor("tun0", is_up=True, is_running=True, has_ipv4=False))
        assert not is_vpn_interface(private_relay_interface)

    def test_down_interface_does_not_qualify(self):
        assert not is_vpn_interface(InterfaceDescriptor("utun3", is_up=False, is_running=True, has_ipv4=True))

    def test_not_running_interface_does_not_qualify(self):
        assert not is_vpn_interface(InterfaceDescriptor("utun3", is_up=True, is_running=False, has_ipv4=True))

    def test_first_matching_prefix_wins(self):
        # "tunnel0" matches "tun" and nothing else; "utun1" matches "utun" first
        assert matching_prefix("utun1") == "utun"
        assert matching_prefix("tunnel0") == "tun"
        assert matching_prefix("en0") is None


@pytest.mark.unit
class TestClassify:
    """Tests for snapshot classification."""

    def test_vpn_and_wifi(self, vpn_interface, wifi_interface):
        result = classify((vpn_interface, wifi_interface))

        assert result == ("utun3",)
        assert ConnectivityStatus.from_names(result).connected

    def test_empty_snapshot(self):
        assert classify(()) == ()

    def test_result_is_sorted_and_deduplicated(self):
        # getifaddrs-style input lists an interface once per address
        snapshot = (active("wg0"), active("utun4"), active("utun10"), active("utun4"), active("ppp0"))

        result = classify(snapshot)

        assert result == ("ppp0", "utun10", "utun4", "wg0")
        assert list(result) == sorted(set(result))

    def test_classify_is_idempotent(self, vpn_interface, wifi_interface, private_relay_interface):
        snapshot = (wifi_interface, private_relay_interface, vpn_interface)

        assert classify(snapshot) == classify(snapshot)

    def test_connected_matches_interfaces_for_all_results(self, vpn_interface, wifi_interface):
        for snapshot in [(), (wifi_interface,), (vpn_interface,), (vpn_interface, wifi_interface)]:
            status = ConnectivityStatus.from_names(classify(snapshot))
            assert status.connected == bool(status.interfaces)


@pytest.mark.unit
class TestGetActiveVpnInterfaces:
    """Tests for enumeration plus classification."""

    def test_uses_enumerated_snapshot(self, vpn_interface, wifi_interface):
        result = get_active_vpn_interfaces(lambda: (vpn_interface, wifi_interface))

        assert result == ("utun3",)

    def test_enumeration_failure_degrades_to_empty(self):
        def broken():
            raise InterfaceEnumerationError("getifaddrs failed")

        assert get_active_vpn_interfaces(broken) == ()

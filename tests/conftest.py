"""
Pytest configuration and shared fixtures for VPNStatus tests.

This module provides reusable fixtures and configuration for all tests.
"""

from concurrent.futures import Future

import pytest

from vpnstatus.models import InterfaceDescriptor
from vpnstatus.network.path_monitor import PathSubscription


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests with no OS or network access")


class InlineExecutor:
    """Runs submitted work immediately on the calling thread."""

    def __init__(self):
        self.shutdown_called = False

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait=True):
        self.shutdown_called = True


class ManualExecutor:
    """Queues submitted work until the test runs it."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run(self, index=0):
        future, fn, args, kwargs = self.pending.pop(index)
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def run_all(self):
        while self.pending:
            self.run()

    def shutdown(self, wait=True):
        pass


class FakePathSource:
    """Path change source driven by the test instead of the OS."""

    def __init__(self):
        self.subscriptions = []

    def subscribe(self, on_change):
        subscription = PathSubscription()
        self.subscriptions.append((subscription, on_change))
        return subscription

    def fire(self):
        for subscription, on_change in self.subscriptions:
            if not subscription.cancelled:
                on_change()


@pytest.fixture
def inline_executor():
    return InlineExecutor()


@pytest.fixture
def manual_executor():
    return ManualExecutor()


@pytest.fixture
def fake_path_source():
    return FakePathSource()


@pytest.fixture
def vpn_interface():
    """A connected OpenVPN/WireGuard style tunnel."""
    return InterfaceDescriptor(name="utun3", is_up=True, is_running=True, has_ipv4=True, addresses=("10.8.0.2",))


@pytest.fixture
def wifi_interface():
    return InterfaceDescriptor(name="en0", is_up=True, is_running=True, has_ipv4=True, addresses=("192.168.1.20",))


@pytest.fixture
def private_relay_interface():
    """System tunnel carrying only an IPv6 link-local address."""
    return InterfaceDescriptor(name="utun0", is_up=True, is_running=True, has_ipv4=False)


@pytest.fixture
def mock_ipapi_response():
    """Provide a mock response from ip-api.com."""
    return {
        "status": "success",
        "country": "Germany",
        "countryCode": "DE",
        "city": "Berlin",
        "query": "1.2.3.4",
    }


@pytest.fixture
def temp_config_dir(tmp_path):
    """Provide a temporary config directory."""
    config_dir = tmp_path / ".config" / "vpnstatus"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset package logging configuration between tests."""
    import logging

    from vpnstatus.logging_config import PACKAGE_LOGGER, VPNStatusLogger

    package_logger = logging.getLogger(PACKAGE_LOGGER)

    def clear():
        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)
            handler.close()
        package_logger.propagate = True
        package_logger.setLevel(logging.NOTSET)
        VPNStatusLogger._initialized = False
        VPNStatusLogger._debug_enabled = False
        VPNStatusLogger._console_handler = None

    clear()
    yield
    clear()

"""
Network path change notifications for VPNStatus.

On macOS this watches the SystemConfiguration dynamic store for changes to
the global and per-interface IP state, which covers VPN connect/disconnect,
Wi-Fi/Ethernet switches and link flaps. The dynamic store is serviced by a
CFRunLoop on a dedicated daemon thread, so callbacks arrive off the caller's
thread and carry no payload.
"""

import threading

try:
    import CoreFoundation
    import SystemConfiguration
except ImportError:
    CoreFoundation = None
    SystemConfiguration = None

from .. import config
from ..logging_config import get_logger

# Get module logger
logger = get_logger(__name__)


def is_supported():
    """Check whether the native path change facility is available."""
    return SystemConfiguration is not None and CoreFoundation is not None


class PathSubscription:
    """Handle returned by PathChangeSource.subscribe(); inert by itself."""

    def __init__(self):
        self._lock = threading.Lock()
        self._cancelled = False

    @property
    def cancelled(self):
        return self._cancelled

    def cancel(self):
        """Stop delivering events. Safe to call more than once."""
        with self._lock:
            if self._cancelled:
                return False
            self._cancelled = True
        self._release()
        return True

    def _release(self):
        pass


class DynamicStoreSubscription(PathSubscription):
    """A dynamic store watched from its own run loop thread."""

    def __init__(self, name, on_change):
        super().__init__()
        self._name = name
        self._on_change = on_change
        self._runloop = None
        self._source = None
        self._started = threading.Event()
        self._thread = threading.Thread(target=self._run, name=f"{name}-path-monitor", daemon=True)

    def start(self, timeout=5.0):
        self._thread.start()
        if not self._started.wait(timeout):
            logger.warning("Path monitor thread did not report ready in time")

    def _callout(self, store, changed_keys, info):
        if self._cancelled:
            return
        logger.debug(f"Network path changed: {list(changed_keys or [])}")
        try:
            self._on_change()
        except Exception as e:
            # Must not raise back into the run loop
            logger.error(f"Path change handler failed: {e}")

    def _run(self):
        try:
            store = SystemConfiguration.SCDynamicStoreCreate(None, self._name, self._callout, None)
            if not store:
                logger.error("Failed to create SCDynamicStore")
                return

            if not SystemConfiguration.SCDynamicStoreSetNotificationKeys(
                store, config.PATH_WATCH_KEYS, config.PATH_WATCH_PATTERNS
            ):
                logger.error("Failed to register dynamic store notification keys")
                return

            source = SystemConfiguration.SCDynamicStoreCreateRunLoopSource(None, store, 0)
            runloop = CoreFoundation.CFRunLoopGetCurrent()

            with self._lock:
                if self._cancelled:
                    return
                self._runloop = runloop
                self._source = source
                CoreFoundation.CFRunLoopAddSource(runloop, source, CoreFoundation.kCFRunLoopDefaultMode)
        finally:
            self._started.set()

        logger.info("Network path monitor is running")
        CoreFoundation.CFRunLoopRun()
        logger.debug("Network path monitor run loop exited")

    def _release(self):
        if self._source is not None:
            CoreFoundation.CFRunLoopSourceInvalidate(self._source)
        if self._runloop is not None:
            CoreFoundation.CFRunLoopStop(self._runloop)
        logger.debug("Network path monitor cancelled")


class PathChangeSource:
    """Subscribes callbacks to OS network path changes."""

    def __init__(self, name=f"com.user.{config.APP_NAME}"):
        self.name = name

    def subscribe(self, on_change):
        """
        Start delivering path change notifications.

        No initial event is delivered; callers that need the current state
        must read it themselves.

        Args:
            on_change: zero-argument callable, invoked from a background thread

        Returns:
            PathSubscription whose cancel() stops delivery
        """
        if not is_supported():
            logger.warning("SystemConfiguration is not available; network changes will not be detected")
            return PathSubscription()

        subscription = DynamicStoreSubscription(self.name, on_change)
        subscription.start()
        return subscription

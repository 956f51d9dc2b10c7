"""
VPN status monitor.

The Monitor owns the MonitorSnapshot. Every read-modify-write of its state
runs on one single-threaded executor (the monitor's serialization domain);
path change callbacks and geolocation completions arrive on other threads
and hop onto that executor before touching state.

Each transition that invalidates the location bumps a generation counter and
tags the fetch it dispatches with it. A completion is applied only if its tag
still matches, so a slow fetch started before a newer path change can never
overwrite the newer state.
"""

import functools
import threading
from concurrent.futures import ThreadPoolExecutor

from . import config
from .external.geolocation import GeolocationError, fetch_location
from .logging_config import get_logger
from .models import ConnectivityStatus, MonitorSnapshot
from .network.classifier import get_active_vpn_interfaces
from .network.interfaces import get_interface_snapshot
from .network.path_monitor import PathChangeSource

# Get module logger
logger = get_logger(__name__)

MAX_CONCURRENT_FETCHES = 4


class Monitor:
    """Tracks VPN connectivity and the public location seen through it."""

    def __init__(
        self,
        fetch=fetch_location,
        path_source=None,
        enumerate_interfaces=get_interface_snapshot,
        fetch_location_enabled=True,
        executor=None,
        fetch_executor=None,
    ):
        """
        Args:
            fetch: zero-argument callable returning a LocationInfo or raising
                GeolocationError
            path_source: object with subscribe(on_change) -> subscription;
                defaults to the SystemConfiguration-backed PathChangeSource
            enumerate_interfaces: callable returning an InterfaceSnapshot
            fetch_location_enabled: if False, only connectivity is tracked
            executor: single-worker executor used as the serialization domain
            fetch_executor: executor that runs geolocation fetches
        """
        self._fetch = fetch
        self._path_source = path_source if path_source is not None else PathChangeSource()
        self._enumerate_interfaces = enumerate_interfaces
        self.fetch_location_enabled = fetch_location_enabled

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="vpnstatus-monitor")
        self._owns_fetch_executor = fetch_executor is None
        self._fetch_executor = fetch_executor or ThreadPoolExecutor(
            max_workers=MAX_CONCURRENT_FETCHES, thread_name_prefix="vpnstatus-geolocation"
        )

        self._snapshot = MonitorSnapshot()
        self._generation = 0
        self._subscription = None
        self._started = False
        self._stopped = False

        self._observers = []
        self._observers_lock = threading.Lock()

    @classmethod
    def from_config(cls, app_config, **kwargs):
        """Build a monitor from a loaded configuration dictionary."""
        fetch = functools.partial(
            fetch_location,
            url=config.get_setting(app_config, "geolocation_url"),
            timeout=config.get_setting(app_config, "geolocation_timeout"),
        )
        kwargs.setdefault("fetch", fetch)
        kwargs.setdefault("fetch_location_enabled", config.get_setting(app_config, "fetch_location"))
        return cls(**kwargs)

    # --- Observed state ---

    @property
    def snapshot(self):
        """The latest published MonitorSnapshot."""
        return self._snapshot

    @property
    def generation(self):
        return self._generation

    @property
    def is_running(self):
        return self._started and not self._stopped

    def subscribe(self, observer):
        """
        Register ``observer(snapshot)`` for every published snapshot.

        Observers run on the monitor's serialization domain and must not
        block. Returns a callable that removes the observer.
        """
        with self._observers_lock:
            self._observers.append(observer)

        def unsubscribe():
            with self._observers_lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    # --- Commands ---

    def start(self):
        """Classify, start watching path changes and fetch the first location."""
        return self._dispatch(self._start)

    def refresh(self):
        """Re-run classification and refetch the location."""
        return self._dispatch(self._update, "manual refresh")

    def stop(self):
        """
        Stop watching path changes. Safe to call more than once.

        In-flight fetches are left to finish; their results are discarded.
        """
        if self._stopped:
            return
        self._stopped = True

        if self._subscription is not None:
            self._subscription.cancel()

        if self._owns_fetch_executor:
            self._fetch_executor.shutdown(wait=False)
        if self._owns_executor:
            self._executor.shutdown(wait=False)
        logger.info("VPN monitor stopped")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.stop()

    # --- Serialization domain ---

    def _dispatch(self, fn, *args):
        try:
            return self._executor.submit(fn, *args)
        except RuntimeError:
            # Executor already shut down
            if self._stopped:
                logger.debug(f"Monitor stopped, dropping {fn.__name__}")
                return None
            raise

    def _on_path_change(self):
        # Called from the path monitor thread
        self._dispatch(self._update, "path change")

    def _start(self):
        if self._started or self._stopped:
            return
        self._started = True

        connectivity = self._classify()
        self._publish(
            MonitorSnapshot(
                connectivity=connectivity,
                location=None,
                is_loading_location=self.fetch_location_enabled,
                generation=self._generation,
            )
        )
        logger.info(f"VPN monitor started ({self._describe(connectivity)})")

        # Store before re-checking so a concurrent stop() either sees the
        # subscription or leaves _stopped set for us to act on
        self._subscription = self._path_source.subscribe(self._on_path_change)
        if self._stopped:
            self._subscription.cancel()
            return

        if self.fetch_location_enabled:
            self._invalidate_location(connectivity)

    def _update(self, reason):
        if self._stopped:
            return

        connectivity = self._classify()
        if connectivity != self._snapshot.connectivity:
            logger.info(f"VPN status changed on {reason}: {self._describe(connectivity)}")
        else:
            logger.debug(f"VPN status unchanged on {reason}: {self._describe(connectivity)}")

        self._invalidate_location(connectivity)

    def _invalidate_location(self, connectivity):
        """Publish connectivity with the location cleared, then start a fetch."""
        self._generation += 1
        generation = self._generation

        self._publish(
            MonitorSnapshot(
                connectivity=connectivity,
                location=None,
                is_loading_location=self.fetch_location_enabled,
                generation=generation,
            )
        )

        if self.fetch_location_enabled:
            try:
                self._fetch_executor.submit(self._run_fetch, generation)
            except RuntimeError:
                logger.debug("Fetch executor shut down, location fetch skipped")

    def _classify(self):
        return ConnectivityStatus.from_names(get_active_vpn_interfaces(self._enumerate_interfaces))

    def _run_fetch(self, generation):
        # Runs on the fetch executor, never on the serialization domain
        try:
            location = self._fetch()
        except GeolocationError as e:
            logger.warning(f"Failed to fetch IP location: {e}")
            location = None
        except Exception as e:
            logger.error(f"Unexpected error fetching IP location: {e}")
            location = None

        self._dispatch(self._apply_location, generation, location)

    def _apply_location(self, generation, location):
        if self._stopped:
            logger.debug(f"Discarding location for generation {generation}: monitor stopped")
            return
        if generation != self._generation:
            logger.debug(f"Discarding stale location for generation {generation} (current {self._generation})")
            return

        self._publish(
            MonitorSnapshot(
                connectivity=self._snapshot.connectivity,
                location=location,
                is_loading_location=False,
                generation=generation,
            )
        )
        if location is not None:
            logger.info(f"Public IP {location.ip} in {location.city}, {location.country}")

    def _publish(self, snapshot):
        self._snapshot = snapshot
        with self._observers_lock:
            observers = list(self._observers)

        for observer in observers:
            try:
                observer(snapshot)
            except Exception as e:
                logger.error(f"Snapshot observer {observer!r} failed: {e}")

    @staticmethod
    def _describe(connectivity):
        if connectivity.connected:
            return f"connected via {', '.join(connectivity.interfaces)}"
        return "disconnected"


def get_status(fetch=fetch_location, enumerate_interfaces=get_interface_snapshot, fetch_location_enabled=True):
    """
    Classify interfaces and look up the location once, synchronously.

    Geolocation failures are logged and leave the location empty.
    """
    connectivity = ConnectivityStatus.from_names(get_active_vpn_interfaces(enumerate_interfaces))
    location = None
    if fetch_location_enabled:
        try:
            location = fetch()
        except GeolocationError as e:
            logger.warning(f"Failed to fetch IP location: {e}")
        except Exception as e:
            logger.error(f"Unexpected error fetching IP location: {e}")

    return MonitorSnapshot(connectivity=connectivity, location=location, is_loading_location=False)

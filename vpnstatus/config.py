"""
Configuration management for VPNStatus.

This module holds the application constants and handles loading of the
optional TOML settings file.
"""

import toml
from pathlib import Path

# --- App Constants ---
APP_NAME = "vpnstatus"
LOG_DIR = Path.home() / "Library" / "Logs"
LOG_FILE = LOG_DIR / "vpnstatus.log"

# --- Logging Constants ---
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# --- Interface Classification Constants ---
# Checked in order; the first matching prefix decides.
VPN_INTERFACE_PREFIXES = (
    "utun",  # macOS tunnels (WireGuard, IKEv2, system VPNs)
    "ppp",  # L2TP, PPTP
    "ipsec",
    "tap",  # OpenVPN TAP
    "tun",  # OpenVPN TUN
    "gpd",  # GlobalProtect
    "wg",  # WireGuard (some implementations)
)

# --- Path Change Constants ---
PATH_WATCH_KEYS = [
    "State:/Network/Global/IPv4",
    "State:/Network/Global/IPv6",
]
PATH_WATCH_PATTERNS = [
    "State:/Network/Interface/.*/IPv4",
    "State:/Network/Interface/.*/IPv6",
    "State:/Network/Interface/.*/Link",
]

# --- External Service Constants ---
GEOLOCATION_API_URL = "http://ip-api.com/json/?fields=status,country,countryCode,city,query"
GEOLOCATION_TIMEOUT = 60  # seconds, same as the platform URL loading default
DEFAULT_DEBUG = False
DEFAULT_FETCH_LOCATION = True

# Default configuration for the application
DEFAULT_CONFIG = {
    "settings": {
        "debug": DEFAULT_DEBUG,
        "fetch_location": DEFAULT_FETCH_LOCATION,
        "geolocation_url": GEOLOCATION_API_URL,
        "geolocation_timeout": GEOLOCATION_TIMEOUT,
    },
}


def get_config_path():
    """Gets the path to the configuration file."""
    return Path.home() / ".config" / APP_NAME / "config.toml"


def load_config():
    """Loads the configuration from the TOML file."""
    path = get_config_path()
    if not path.exists():
        # Create a default config if one doesn't exist
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            toml.dump(DEFAULT_CONFIG, f)
        return DEFAULT_CONFIG

    with open(path, "r") as f:
        config = toml.load(f)

    # Import logging from our centralized module
    from .logging_config import get_logger

    logger = get_logger(__name__)
    logger.debug(f"Loaded settings: {sorted(config.get('settings', {}).keys())}")
    return config


def get_setting(config, key):
    """Read a value from the [settings] table, falling back to the default."""
    return config.get("settings", {}).get(key, DEFAULT_CONFIG["settings"][key])

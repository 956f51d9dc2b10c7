"""
Immutable state types shared by the classifier, the geolocation client and
the monitor.

Every value here is a frozen dataclass: once a snapshot has been handed to an
observer it can be read from any thread without synchronization.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class InterfaceDescriptor:
    """One interface record as captured from the OS interface table."""

    name: str
    is_up: bool = False
    is_running: bool = False
    has_ipv4: bool = False
    addresses: Tuple[str, ...] = ()


# A point-in-time capture of the interface table.
InterfaceSnapshot = Tuple[InterfaceDescriptor, ...]


@dataclass(frozen=True)
class ConnectivityStatus:
    """VPN interfaces detected by one classification pass."""

    interfaces: Tuple[str, ...] = ()

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "ConnectivityStatus":
        return cls(interfaces=tuple(sorted(set(names))))

    @property
    def connected(self) -> bool:
        return bool(self.interfaces)


@dataclass(frozen=True)
class LocationInfo:
    """Public location as reported by the geolocation endpoint."""

    ip: str
    country: str
    country_code: str
    city: str

    @property
    def flag(self) -> str:
        """
        Regional indicator emoji for the country code ("DE" -> flag of Germany).

        Returns an empty string when the code is not two ASCII letters.
        """
        code = self.country_code.upper()
        if len(code) != 2 or not code.isascii() or not code.isalpha():
            return ""
        return "".join(chr(0x1F1E6 + ord(c) - ord("A")) for c in code)

    def to_dict(self) -> dict:
        return {
            "ip": self.ip,
            "country": self.country,
            "country_code": self.country_code,
            "city": self.city,
        }


@dataclass(frozen=True)
class MonitorSnapshot:
    """
    The externally observed monitor state.

    Connectivity, location and the loading flag always travel together, so an
    observer never sees a location that belongs to a different connectivity
    state than the one it is displayed with.
    """

    connectivity: ConnectivityStatus = field(default_factory=ConnectivityStatus)
    location: Optional[LocationInfo] = None
    is_loading_location: bool = False
    generation: int = 0

    @property
    def connected(self) -> bool:
        return self.connectivity.connected

    @property
    def interfaces(self) -> Tuple[str, ...]:
        return self.connectivity.interfaces

    @property
    def ip_address(self) -> Optional[str]:
        return self.location.ip if self.location else None

    @property
    def country(self) -> Optional[str]:
        return self.location.country if self.location else None

    @property
    def country_code(self) -> Optional[str]:
        return self.location.country_code if self.location else None

    @property
    def city(self) -> Optional[str]:
        return self.location.city if self.location else None

    def to_dict(self) -> dict:
        return {
            "connected": self.connected,
            "interfaces": list(self.interfaces),
            "ip_address": self.ip_address,
            "country": self.country,
            "country_code": self.country_code,
            "city": self.city,
            "is_loading_location": self.is_loading_location,
        }

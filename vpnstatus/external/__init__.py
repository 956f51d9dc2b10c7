"""
External services module for VPNStatus.

Currently only the ip-api.com geolocation lookup.
"""

from .geolocation import (
    DecodeError,
    GeolocationError,
    TransportError,
    UpstreamRejected,
    fetch_location,
    parse_response,
)

__all__ = [
    "DecodeError",
    "GeolocationError",
    "TransportError",
    "UpstreamRejected",
    "fetch_location",
    "parse_response",
]

"""
Public IP geolocation lookup for VPNStatus.

This module asks ip-api.com where the host's traffic currently appears to
come from. One call is one fresh HTTP round trip: no retry and no caching.
"""

import http.client
import json
import socket
import urllib.error
import urllib.request

from .. import __version__, config
from ..logging_config import get_logger
from ..models import LocationInfo

# Get module logger
logger = get_logger(__name__)

REQUIRED_FIELDS = ("country", "countryCode", "city", "query")


class GeolocationError(Exception):
    """Base class for failed location lookups."""


class TransportError(GeolocationError):
    """The request never produced a usable HTTP response (DNS, connect, timeout, HTTP status)."""


class DecodeError(GeolocationError):
    """The response body is not the JSON object we expect."""


class UpstreamRejected(GeolocationError):
    """The service answered but reported a status other than "success"."""

    def __init__(self, status, message=None):
        self.status = status
        self.message = message
        detail = f": {message}" if message else ""
        super().__init__(f"Geolocation service returned status {status!r}{detail}")


def parse_response(body):
    """
    Turn an ip-api.com response body into a LocationInfo.

    Args:
        body: raw response bytes or text

    Raises:
        DecodeError: body is not a JSON object or lacks a required field
        UpstreamRejected: status is anything but "success"
    """
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodeError(f"Invalid JSON from geolocation service: {e}") from e

    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")

    status = data.get("status")
    if status != "success":
        raise UpstreamRejected(status, data.get("message"))

    missing = [name for name in REQUIRED_FIELDS if not isinstance(data.get(name), str)]
    if missing:
        raise DecodeError(f"Geolocation response missing fields: {', '.join(missing)}")

    return LocationInfo(
        ip=data["query"],
        country=data["country"],
        country_code=data["countryCode"],
        city=data["city"],
    )


def fetch_location(url=config.GEOLOCATION_API_URL, timeout=config.GEOLOCATION_TIMEOUT):
    """
    Fetch the public IP address and its location.

    Args:
        url: endpoint returning {status, country, countryCode, city, query}
        timeout: socket timeout in seconds

    Returns:
        LocationInfo

    Raises:
        TransportError, DecodeError, UpstreamRejected
    """
    logger.debug(f"Making request to {url}")
    try:
        request = urllib.request.Request(url)
        request.add_header("User-Agent", f"VPNStatus/{__version__}")
        with urllib.request.urlopen(request, timeout=timeout) as response:
            body = response.read()
    except urllib.error.HTTPError as e:
        raise TransportError(f"HTTP {e.code} from geolocation service") from e
    except urllib.error.URLError as e:
        raise TransportError(f"Could not reach geolocation service: {e.reason}") from e
    except (socket.timeout, OSError, http.client.HTTPException) as e:
        raise TransportError(f"Geolocation request failed: {e!r}") from e
    except ValueError as e:
        # Malformed or scheme-less endpoint URL
        raise TransportError(f"Invalid geolocation URL {url!r}: {e}") from e

    location = parse_response(body)
    logger.debug(f"Geolocation result: {location.ip} ({location.city}, {location.country_code})")
    return location

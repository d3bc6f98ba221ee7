"""HTTP access to the tourmanager scraper service.

Builds resource URLs and performs the blocking GET + JSON parse. Parsed
bodies are passed on as-is; ``decode_records`` is only used by stores
created with ``strict=True``, and never looks inside a record.
"""

import logging
from typing import Any

import requests

from .config import BASE_URL, EVENT_CONFIG, EventConfig, Resource

_logger = logging.getLogger(__name__)


def build_url(
    resource: Resource,
    config: EventConfig = EVENT_CONFIG,
    base_url: str = BASE_URL,
) -> str:
    """Return ``<base_url>/<resource path>/<event_id>/<event_year>``.

    Args:
        resource: Resource kind to request.
        config: Event identifiers, used verbatim.
        base_url: Service root without trailing slash.
    """
    return f"{base_url}/{resource.value}/{config.event_id}/{config.event_year}"


def get_json(url: str, timeout: float | None = None) -> Any:
    """GET ``url`` and parse the body as JSON.

    The status code is not checked: error pages that still carry JSON are
    returned like any other body.

    Args:
        url: Absolute URL to fetch.
        timeout: Seconds before ``requests`` gives up, or ``None`` to wait
            indefinitely.

    Returns:
        Any: The decoded JSON document.

    Raises:
        requests.RequestException: On network failure or a body that is not
            valid JSON.
    """
    _logger.debug("GET %s", url)
    r = requests.get(url, timeout=timeout)
    if not r.ok:
        _logger.warning("GET %s returned HTTP %s", url, r.status_code)
    return r.json()


def decode_records(resource: Resource, payload: Any) -> tuple[dict[str, Any], ...]:
    """Check that ``payload`` is a JSON array of objects.

    Args:
        resource: Resource the payload was fetched for (used in errors).
        payload: Decoded JSON document.

    Returns:
        tuple[dict[str, Any], ...]: The records, in server order.

    Raises:
        PayloadError: When the payload is not a list, or an item is not an
            object.
    """
    if not isinstance(payload, list):
        raise PayloadError(resource, payload)
    for item in payload:
        if not isinstance(item, dict):
            raise PayloadError(resource, item)
    return tuple(payload)


class TourManagerError(Exception):
    """Base class for tourmanager client errors."""


class PayloadError(TourManagerError, ValueError):
    """Raised when a response body is not an array of JSON objects.

    Attributes:
        resource: Resource whose payload was rejected.
        payload_type: Name of the offending JSON value's Python type.
    """

    def __init__(self, resource: Resource, value: Any) -> None:
        self.resource = resource
        self.payload_type = type(value).__name__
        super().__init__(
            f"Unexpected {resource.value} payload: expected a list of objects, "
            f"got {self.payload_type}"
        )

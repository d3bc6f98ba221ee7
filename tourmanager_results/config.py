"""Event identifiers and service location.

The defaults point at the Vuelta a España 2025 on the tourmanager scraper
service. ``load_event_config`` and ``load_base_url`` let the environment
(or a ``.env`` file loaded by the CLI) override them.
"""

import enum
import os
from collections.abc import Mapping
from dataclasses import dataclass

BASE_URL = "https://tourmanager-scraper.onrender.com"


@dataclass(frozen=True)
class EventConfig:
    """Identifiers of a single race series.

    Attributes:
        event_id: Slug of the race, e.g. ``"vuelta-a-espana"``.
        event_year: Edition year as a string, e.g. ``"2025"``.
    """

    event_id: str
    event_year: str


EVENT_CONFIG = EventConfig(event_id="vuelta-a-espana", event_year="2025")


class Resource(str, enum.Enum):
    """Resource kinds served by the scraper; the value is the URL path."""

    STAGES = "stages"
    RANKINGS = "ranking"
    SELECTIONS = "selections"
    POINTS = "points"
    FAVORITES = "startlist_favorites"

    @property
    def field(self) -> str:
        """Name of the store collection filled by this resource."""
        return self.name.lower()


def load_event_config(environ: Mapping[str, str] | None = None) -> EventConfig:
    """Build an ``EventConfig`` from ``TOURMANAGER_EVENT_*`` variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        EventConfig: Values from the environment, falling back to
        ``EVENT_CONFIG`` for anything unset or empty.
    """
    env = os.environ if environ is None else environ
    return EventConfig(
        event_id=env.get("TOURMANAGER_EVENT_ID") or EVENT_CONFIG.event_id,
        event_year=env.get("TOURMANAGER_EVENT_YEAR") or EVENT_CONFIG.event_year,
    )


def load_base_url(environ: Mapping[str, str] | None = None) -> str:
    """Return the service root from ``TOURMANAGER_BASE_URL`` or ``BASE_URL``."""
    env = os.environ if environ is None else environ
    return (env.get("TOURMANAGER_BASE_URL") or BASE_URL).rstrip("/")

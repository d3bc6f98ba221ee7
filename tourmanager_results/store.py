"""Observable in-memory store for tourmanager event data.

``DataStore`` owns one collection per ``Resource`` plus the ``loading`` and
``error`` flags the UI watches. Each fetch runs the blocking HTTP call in a
worker thread and applies its result on the event loop as a single state
transition, so the store itself needs no locking.

The shared ``loading``/``error`` fields are last-writer-wins across
concurrent fetches: the fetch that settles last decides ``loading``, and an
error stays set until ``clear_error`` is called. ``status`` tracks the same
flags per resource.
"""

import asyncio
import copy
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .config import BASE_URL, EVENT_CONFIG, EventConfig, Resource
from .fetcher import build_url, decode_records, get_json

_logger = logging.getLogger(__name__)

Record = dict[str, Any]

# Marks a fetch that produced no value (failed or cancelled).
_NO_VALUE = object()


@dataclass(frozen=True)
class ResourceStatus:
    """Loading/error flags of a single resource."""

    loading: bool = False
    error: Exception | None = None


@dataclass(frozen=True)
class StoreSnapshot:
    """Point-in-time copy of the store state handed to readers.

    Collections are normally tuples of record dicts. Whatever other JSON
    value the service returned is kept as-is.
    """

    stages: Any
    rankings: Any
    selections: Any
    points: Any
    favorites: Any
    loading: bool
    error: Exception | None
    statuses: Mapping[Resource, ResourceStatus]

    def records(self, resource: Resource) -> Any:
        """Return the collection filled by ``resource``."""
        return getattr(self, resource.field)


Listener = Callable[[StoreSnapshot], None]


class DataStore:
    """Fetch tourmanager resources and hold the results.

    Attributes:
        config: Event identifiers used to build request paths.
        base_url: Service root without trailing slash.
        timeout: Per-request timeout in seconds, ``None`` for no limit.
        strict: Reject payloads that are not an array of objects.
    """

    def __init__(
        self,
        config: EventConfig = EVENT_CONFIG,
        base_url: str = BASE_URL,
        timeout: float | None = None,
        strict: bool = False,
    ) -> None:
        """Create an empty store.

        Args:
            config: Event identifiers, used verbatim in request paths.
            base_url: Service root; a trailing slash is dropped.
            timeout: Seconds before a request gives up. ``None`` waits
                indefinitely.
            strict: When True, a body that is not a JSON array of objects is
                recorded as a ``PayloadError`` instead of being stored.
        """
        self.config = config
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.strict = strict
        self._collections: dict[Resource, Any] = {r: () for r in Resource}
        self._statuses: dict[Resource, ResourceStatus] = {
            r: ResourceStatus() for r in Resource
        }
        self._loading = False
        self._error: Exception | None = None
        self._listeners: list[Listener] = []

    # -- read access -------------------------------------------------------

    def _records(self, resource: Resource) -> Any:
        value = copy.deepcopy(self._collections[resource])
        return tuple(value) if isinstance(value, list) else value

    @property
    def stages(self) -> Any:
        return self._records(Resource.STAGES)

    @property
    def rankings(self) -> Any:
        return self._records(Resource.RANKINGS)

    @property
    def selections(self) -> Any:
        return self._records(Resource.SELECTIONS)

    @property
    def points(self) -> Any:
        return self._records(Resource.POINTS)

    @property
    def favorites(self) -> Any:
        return self._records(Resource.FAVORITES)

    @property
    def loading(self) -> bool:
        """True while the most recently started or settled fetch is running."""
        return self._loading

    @property
    def error(self) -> Exception | None:
        """Last captured fetch failure, kept until ``clear_error``."""
        return self._error

    def status(self, resource: Resource) -> ResourceStatus:
        """Return the loading/error flags of one resource."""
        return self._statuses[resource]

    def snapshot(self) -> StoreSnapshot:
        """Return a deep copy of the whole state."""
        return StoreSnapshot(
            stages=self._records(Resource.STAGES),
            rankings=self._records(Resource.RANKINGS),
            selections=self._records(Resource.SELECTIONS),
            points=self._records(Resource.POINTS),
            favorites=self._records(Resource.FAVORITES),
            loading=self._loading,
            error=self._error,
            statuses=MappingProxyType(dict(self._statuses)),
        )

    # -- observation -------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every state change.

        Args:
            listener: Callable receiving a ``StoreSnapshot``.

        Returns:
            Callable[[], None]: Function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                _logger.debug("store listener failed", exc_info=True)

    # -- mutation ----------------------------------------------------------

    def _begin(self, resource: Resource) -> None:
        self._loading = True
        prev = self._statuses[resource]
        self._statuses[resource] = ResourceStatus(loading=True, error=prev.error)
        self._notify()

    def _settle(self, resource: Resource, value: Any, error: Exception | None) -> None:
        if value is not _NO_VALUE:
            self._collections[resource] = value
        if error is not None:
            self._error = error
        prev = self._statuses[resource]
        self._statuses[resource] = ResourceStatus(
            loading=False, error=error if error is not None else prev.error
        )
        self._loading = False
        self._notify()

    def clear_error(self, resource: Resource | None = None) -> None:
        """Reset captured errors.

        Args:
            resource: Only clear this resource's error. The shared error is
                cleared too once no other resource still holds the same
                failure. ``None`` clears everything.
        """
        if resource is None:
            self._error = None
            self._statuses = {
                r: ResourceStatus(loading=s.loading) for r, s in self._statuses.items()
            }
        else:
            prev = self._statuses[resource]
            self._statuses[resource] = ResourceStatus(loading=prev.loading)
            if prev.error is not None and prev.error is self._error:
                if not any(s.error is prev.error for s in self._statuses.values()):
                    self._error = None
        self._notify()

    # -- fetch operations --------------------------------------------------

    async def fetch(self, resource: Resource) -> None:
        """Fetch ``resource`` and replace its collection with the parsed body.

        Failures are stored in ``error`` and in the resource status rather
        than raised. The collection keeps its previous value on failure.
        """
        self._begin(resource)
        value: Any = _NO_VALUE
        error: Exception | None = None
        try:
            url = build_url(resource, self.config, self.base_url)
            payload = await asyncio.to_thread(get_json, url, self.timeout)
            value = decode_records(resource, payload) if self.strict else payload
        except Exception as e:
            _logger.warning("Failed to fetch %s: %s", resource.value, e)
            error = e
        finally:
            self._settle(resource, value, error)

    async def fetch_stages(self) -> None:
        """Fetch the stage list into ``stages``."""
        await self.fetch(Resource.STAGES)

    async def fetch_rankings(self) -> None:
        """Fetch the event ranking into ``rankings``."""
        await self.fetch(Resource.RANKINGS)

    async def fetch_selections(self) -> None:
        """Fetch user selections into ``selections``."""
        await self.fetch(Resource.SELECTIONS)

    async def fetch_points(self) -> None:
        """Fetch scoring records into ``points``."""
        await self.fetch(Resource.POINTS)

    async def fetch_favorites(self) -> None:
        """Fetch start-list favorites into ``favorites``."""
        await self.fetch(Resource.FAVORITES)

    async def fetch_many(self, resources: Iterable[Resource]) -> None:
        """Fetch several resources concurrently."""
        await asyncio.gather(*(self.fetch(r) for r in resources))

    async def fetch_all(self) -> None:
        """Fetch every resource concurrently."""
        await self.fetch_many(Resource)

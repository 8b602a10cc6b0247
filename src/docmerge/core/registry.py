"""Registry merging independently produced index fragments into one view.

Fragments arrive in any order and at any time, one per producing crate.
Each registry starts out *buffering*: fragments are merged into the index and
queued until a consumer attaches. The first :meth:`FragmentRegistry.attach`
flushes the queue as a single batch and switches the registry to *attached*,
after which every registration is forwarded to the consumer on its own.

Merging is plain concatenation in registration order. Nothing is ever
deduplicated or removed, so registering the same fragment twice duplicates
its items.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
import logging
from threading import RLock
from types import MappingProxyType
from typing import Any, Generic, TypeVar


logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")


class RegistryState(str, Enum):
    """Lifecycle of a registry relative to its consumer."""

    BUFFERING = "buffering"
    ATTACHED = "attached"


@dataclass(frozen=True, slots=True, eq=False)
class Fragment(Generic[ItemT]):
    """One producer's contribution: items grouped by index key.

    Fragments compare and hash by identity.
    """

    producer_id: str
    entries: Mapping[str, tuple[ItemT, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {str(key): tuple(items) for key, items in self.entries.items()}
        object.__setattr__(self, "entries", MappingProxyType(frozen))

    def keys(self) -> list[str]:
        return list(self.entries)

    @property
    def item_count(self) -> int:
        return sum(len(items) for items in self.entries.values())


@dataclass(slots=True, eq=False)
class IndexBatch(Mapping[str, list[ItemT]], Generic[ItemT]):
    """Payload handed to a consumer, either the initial flush or one fragment."""

    entries: dict[str, list[ItemT]]
    producers: list[str] = field(default_factory=list)
    initial: bool = False

    def __getitem__(self, key: str) -> list[ItemT]:
        return self.entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        kind = "initial" if self.initial else "incremental"
        return f"IndexBatch({kind}, producers={self.producers!r}, entries={self.entries!r})"


Consumer = Callable[[IndexBatch[Any]], None]


class FragmentRegistry(Generic[ItemT]):
    """Accumulate fragments and stream them to a single attached consumer."""

    def __init__(self, *, name: str = "index") -> None:
        self.name = name
        self._merged: dict[str, list[ItemT]] = {}
        self._pending: list[Fragment[ItemT]] = []
        self._producers: list[str] = []
        self._consumer: Consumer | None = None
        self._state = RegistryState.BUFFERING
        self._lock = RLock()
        self._on_register: dict[RegistryState, Callable[[Fragment[ItemT]], None]] = {
            RegistryState.BUFFERING: self._buffer,
            RegistryState.ATTACHED: self._stream,
        }
        self._on_attach: dict[RegistryState, Callable[[Consumer], None]] = {
            RegistryState.BUFFERING: self._flush,
            RegistryState.ATTACHED: self._replace,
        }

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def consumer(self) -> Consumer | None:
        return self._consumer

    @property
    def pending_count(self) -> int:
        """Number of fragments waiting for a consumer."""
        with self._lock:
            return len(self._pending)

    @property
    def fragment_count(self) -> int:
        """Number of fragments registered so far, duplicates included."""
        with self._lock:
            return len(self._producers)

    def register(self, fragment: Fragment[ItemT]) -> None:
        """Merge ``fragment`` into the index and forward or queue it."""
        with self._lock:
            self._merge(fragment)
            self._on_register[self._state](fragment)

    def attach(self, consumer: Consumer) -> None:
        """Attach ``consumer``; the first call flushes every queued fragment."""
        if not callable(consumer):
            raise TypeError("Index consumer must be callable.")
        with self._lock:
            self._on_attach[self._state](consumer)

    def lookup(self, key: str) -> list[ItemT]:
        """Return the items merged under ``key``, or an empty list."""
        with self._lock:
            return list(self._merged.get(key, ()))

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._merged)

    def producers(self) -> list[str]:
        """Producer ids in registration order."""
        with self._lock:
            return list(self._producers)

    def snapshot(self) -> dict[str, list[ItemT]]:
        """Return a copy of the merged index."""
        with self._lock:
            return {key: list(items) for key, items in self._merged.items()}

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._merged

    def __len__(self) -> int:
        with self._lock:
            return len(self._merged)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, state={self._state.value}, "
            f"keys={len(self._merged)}, fragments={len(self._producers)})"
        )

    def _merge(self, fragment: Fragment[ItemT]) -> None:
        for key, items in fragment.entries.items():
            self._merged.setdefault(key, []).extend(items)
        self._producers.append(fragment.producer_id)

    def _buffer(self, fragment: Fragment[ItemT]) -> None:
        self._pending.append(fragment)
        logger.debug(
            "%s: queued fragment from %s (%d pending)",
            self.name,
            fragment.producer_id,
            len(self._pending),
        )

    def _stream(self, fragment: Fragment[ItemT]) -> None:
        batch = IndexBatch(
            entries={key: list(items) for key, items in fragment.entries.items()},
            producers=[fragment.producer_id],
        )
        logger.debug("%s: delivering fragment from %s", self.name, fragment.producer_id)
        self._deliver(batch)

    def _flush(self, consumer: Consumer) -> None:
        pending, self._pending = self._pending, []
        self._consumer = consumer
        self._state = RegistryState.ATTACHED
        batch = IndexBatch(
            entries=self.snapshot(),
            producers=[fragment.producer_id for fragment in pending],
            initial=True,
        )
        logger.debug("%s: consumer attached, flushing %d fragments", self.name, len(pending))
        self._deliver(batch)

    def _replace(self, consumer: Consumer) -> None:
        self._consumer = consumer
        logger.debug("%s: consumer replaced; earlier batches are not replayed", self.name)

    def _deliver(self, batch: IndexBatch[ItemT]) -> None:
        consumer = self._consumer
        if consumer is not None:
            consumer(batch)


def register_all(registry: FragmentRegistry[ItemT], fragments: Iterable[Fragment[ItemT]]) -> int:
    """Register ``fragments`` in order and return how many were registered."""
    count = 0
    for fragment in fragments:
        registry.register(fragment)
        count += 1
    return count


__all__ = [
    "Consumer",
    "Fragment",
    "FragmentRegistry",
    "IndexBatch",
    "ItemT",
    "RegistryState",
    "register_all",
]

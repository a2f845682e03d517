"""Bouncing registry - set of markers currently bouncing"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Protocol

from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from models.bouncing import AnimationConfig

log = get_logger().for_category(LogCategory.REGISTRY)


class BouncingEntry(Protocol):
    """What the registry needs from a bouncing marker's scheduler"""

    @property
    def marker(self) -> Any: ...

    @property
    def config(self) -> "AnimationConfig": ...

    def release(self) -> None:
        """Stop bouncing without calling back into the registry."""
        ...


class BouncingRegistry:
    """
    Ordered set of bouncing entries (activation order).

    Invariants:
    - an entry appears at most once
    - at most one exclusive entry is present; adding an exclusive entry
      empties the registry first, adding a non-exclusive one evicts the
      exclusive entry if any

    Entries are only touched from event loop callbacks, so no locking.
    """

    def __init__(self):
        # entry → effective exclusive flag at activation time
        self._entries: Dict[BouncingEntry, bool] = {}

    def add(self, entry: BouncingEntry, exclusive_requested: bool = False) -> None:
        if entry in self._entries:
            return

        exclusive = bool(exclusive_requested or entry.config.exclusive)
        if exclusive:
            if self._entries:
                log.info(f"Exclusive bounce: stopping {len(self._entries)} markers", marker=entry.marker)
            self.stop_all()
        else:
            self._evict_exclusive()

        self._entries[entry] = exclusive
        log.debug("Marker registered", marker=entry.marker, exclusive=exclusive, bouncing=len(self._entries))

    def remove(self, entry: BouncingEntry) -> None:
        if self._entries.pop(entry, None) is not None:
            log.debug("Marker unregistered", marker=entry.marker, bouncing=len(self._entries))

    def stop_all(self) -> None:
        """Stop and remove every entry, in registration order."""
        entries = list(self._entries)
        self._entries.clear()
        for entry in entries:
            entry.release()

    def _evict_exclusive(self) -> None:
        for entry, exclusive in list(self._entries.items()):
            if exclusive:
                del self._entries[entry]
                entry.release()
                log.info("Exclusive marker stopped", marker=entry.marker)

    # ------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------

    def markers(self) -> List[Any]:
        return [entry.marker for entry in self._entries]

    def entries(self) -> List[BouncingEntry]:
        return list(self._entries)

    def is_exclusive(self, entry: BouncingEntry) -> bool:
        return self._entries.get(entry, False)

    def __contains__(self, entry: object) -> bool:
        return entry in self._entries

    def __iter__(self) -> Iterator[BouncingEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

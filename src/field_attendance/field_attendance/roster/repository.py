from __future__ import annotations

from typing import Protocol

from .model import RosterSnapshot


class RosterRepository(Protocol):
    """Persistence collaborator for employees and departments.

    Note: services depend on this interface, not on a concrete store.
    ``save_roster`` writes both collections as one unit and fails with
    ``ConcurrentModificationError`` when ``expected_version`` is stale.
    """

    def load_roster(self) -> RosterSnapshot:
        raise NotImplementedError

    def save_roster(self, snapshot: RosterSnapshot, *, expected_version: int) -> RosterSnapshot:
        """Persist and return the snapshot stamped with its new version."""

        raise NotImplementedError

from __future__ import annotations

from typing import Dict

from ocrguard.datatypes.discord_datatypes import UserID

MAX_TRACKED_USERS = 5000
EVICTION_BATCH = 1000


class TriggerCounter:
    """
    Cumulative count of confirmed violations per author.

    Counts live for the process lifetime. When more than ``max_users`` authors
    are tracked, the ``eviction_batch`` oldest entries (by first violation)
    are dropped. This is a soft memory bound, not an LRU.
    """

    def __init__(self, max_users: int = MAX_TRACKED_USERS, eviction_batch: int = EVICTION_BATCH) -> None:
        self._max_users = max_users
        self._eviction_batch = eviction_batch
        self._counts: Dict[UserID, int] = {}

    def increment(self, user_id: UserID) -> int:
        """Record a violation and return the author's new total."""
        count = self._counts.get(user_id, 0) + 1
        self._counts[user_id] = count

        if len(self._counts) > self._max_users:
            for stale in list(self._counts)[: self._eviction_batch]:
                del self._counts[stale]

        return count

    def get(self, user_id: UserID) -> int:
        return self._counts.get(user_id, 0)

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._counts

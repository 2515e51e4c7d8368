from ocrguard.datatypes.discord_datatypes import UserID
from ocrguard.moderation.trigger_counter import EVICTION_BATCH, MAX_TRACKED_USERS, TriggerCounter


def test_increment_counts_per_user():
    counter = TriggerCounter()
    assert counter.increment(UserID(1)) == 1
    assert counter.increment(UserID(1)) == 2
    assert counter.increment(UserID(2)) == 1
    assert counter.get(UserID(1)) == 2
    assert counter.get(UserID(3)) == 0


def test_eviction_drops_oldest_entries():
    counter = TriggerCounter(max_users=3, eviction_batch=2)
    for uid in range(4):
        counter.increment(UserID(uid))

    assert len(counter) == 2
    assert UserID(0) not in counter
    assert UserID(1) not in counter
    assert counter.get(UserID(3)) == 1


def test_default_bound():
    counter = TriggerCounter()
    for uid in range(MAX_TRACKED_USERS + 1):
        counter.increment(UserID(uid))
    assert len(counter) == MAX_TRACKED_USERS + 1 - EVICTION_BATCH

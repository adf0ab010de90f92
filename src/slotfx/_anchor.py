"""Data anchor — plain Python structures that hold all scheduler state.

Owners are thin handles holding an _id; every slot is addressed by
(owner_id, slot_id). Separating data from behavior keeps the scheduler
functions stateless and makes the arena easy to inspect in tests.
"""

import itertools
import threading

# Owner state
owner_names: dict[int, str | None] = {}
slot_order: dict[int, list] = {}  # owner_id -> slot ids in first-registration order
pending: dict[int, dict] = {}  # owner_id -> {slot_id: (body, deps)} for the current cycle
locks: dict[int, threading.Lock] = {}
torn_down: dict[int, bool] = {}

# Slot state, keyed by (owner_id, slot_id)
has_run: dict[tuple, bool] = {}
last_dependencies: dict[tuple, object] = {}
cleanups: dict[tuple, object] = {}  # key -> callable or None

# ID generation — itertools.count is thread-safe (C-level GIL atomic)
_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)


def release(owner_id: int) -> None:
    """Drop references to user callables for a torn-down owner.

    has_run and last_dependencies are kept for introspection.
    """
    pending[owner_id].clear()
    for slot_id in slot_order[owner_id]:
        cleanups.pop((owner_id, slot_id), None)


def forget(owner_id: int) -> None:
    """Drop every entry of an owner. Runs when its handle is garbage-collected."""
    for slot_id in slot_order.pop(owner_id, ()):
        key = (owner_id, slot_id)
        has_run.pop(key, None)
        last_dependencies.pop(key, None)
        cleanups.pop(key, None)
    owner_names.pop(owner_id, None)
    pending.pop(owner_id, None)
    locks.pop(owner_id, None)
    torn_down.pop(owner_id, None)

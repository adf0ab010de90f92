"""Effect scheduler — decides when registered effects run and sequences cleanups.

An owner (e.g. one component instance) registers effect slots during a
render, then commits. At commit time each slot either runs (previous cleanup
first, then the body) or is skipped, depending on its dependency snapshot.
Teardown fires every outstanding cleanup exactly once.

All state lives in _anchor — the functions here are stateless.

Errors raised by effect bodies and cleanups propagate unchanged to the caller
of commit()/teardown(). A cleanup is detached before it is invoked, so a
failing cleanup is never invoked a second time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Hashable

from slotfx import _anchor
from slotfx._tracking import exclusive, is_busy
from slotfx.deps import ALWAYS, Snapshot, check_arity, should_run, snapshot
from slotfx.errors import DoubleTeardown, OwnerTornDown, ReentrantCommit

if TYPE_CHECKING:
    from slotfx.owner import Owner

Cleanup = Callable[[], None]
EffectBody = Callable[[], "Cleanup | None"]


def register(
    owner: Owner,
    slot_id: Hashable,
    body: EffectBody,
    dependencies=ALWAYS,
) -> None:
    """Queue an effect for the owner's next commit. Nothing runs yet.

    Registering the same slot twice before a commit keeps the latest
    registration, at the position of the first.

    A body may carry a zero-argument `ready` attribute. When it returns False
    at commit time the slot is treated as not due: no cleanup, no run, and its
    has_run and last_dependencies stay as they were.
    """
    if not callable(body):
        raise TypeError(f"effect body must be callable, not {type(body).__name__}")
    if _anchor.torn_down[owner._id]:
        raise OwnerTornDown(f"cannot register {slot_id!r}: {owner!r} was torn down")
    if is_busy(owner):
        raise ReentrantCommit(f"cannot register {slot_id!r} while {owner!r} is committing")

    deps = snapshot(dependencies)
    key = (owner._id, slot_id)
    check_arity(slot_id, _anchor.last_dependencies.get(key), deps)

    if key not in _anchor.has_run:
        _anchor.slot_order[owner._id].append(slot_id)
        _anchor.has_run[key] = False
        _anchor.last_dependencies[key] = None
        _anchor.cleanups[key] = None
    _anchor.pending[owner._id][slot_id] = (body, deps)


def commit(owner: Owner) -> None:
    """Run the effects queued since the last commit, in registration order.

    Slots whose dependencies did not change are skipped. If a body or cleanup
    raises, the remaining slots of this cycle are not run and the error
    propagates.
    """
    if _anchor.torn_down[owner._id]:
        raise OwnerTornDown(f"cannot commit {owner!r}: it was torn down")

    with exclusive(owner, "commit"):
        # Snapshot and clear — a failing slot must not leave stale registrations.
        batch = list(_anchor.pending[owner._id].items())
        _anchor.pending[owner._id].clear()
        for slot_id, (body, deps) in batch:
            _run_slot((owner._id, slot_id), body, deps)


def _run_slot(key: tuple, body: EffectBody, deps: Snapshot) -> None:
    if not should_run(_anchor.has_run[key], _anchor.last_dependencies[key], deps):
        return
    ready = getattr(body, "ready", None)
    if ready is not None and not ready():
        # Not due yet: leave the slot as it was so a later cycle runs it.
        return

    _invoke_cleanup(key)

    result = body()
    if result is not None and not callable(result):
        raise TypeError(
            f"effect for slot {key[1]!r} returned {type(result).__name__}; "
            "expected a cleanup callable or None"
        )
    _anchor.cleanups[key] = result
    _anchor.has_run[key] = True
    _anchor.last_dependencies[key] = deps


def _invoke_cleanup(key: tuple) -> None:
    cleanup = _anchor.cleanups[key]
    if cleanup is None:
        return
    _anchor.cleanups[key] = None  # detach first: never invoked twice
    cleanup()


def teardown(owner: Owner) -> None:
    """Destroy the owner: fire every outstanding cleanup exactly once.

    All cleanups are attempted even if some raise. One failure is re-raised
    as-is; several are raised together as an ExceptionGroup.
    """
    if _anchor.torn_down[owner._id]:
        raise DoubleTeardown(f"{owner!r} was already torn down")

    with exclusive(owner, "teardown"):
        _anchor.torn_down[owner._id] = True
        errors: list[Exception] = []
        try:
            for slot_id in _anchor.slot_order[owner._id]:
                try:
                    _invoke_cleanup((owner._id, slot_id))
                except Exception as e:
                    errors.append(e)
        finally:
            _anchor.release(owner._id)

    if len(errors) == 1:
        raise errors[0]
    if errors:
        raise ExceptionGroup(f"{len(errors)} cleanups failed while tearing down {owner!r}", errors)


# ─── Introspection ───────────────────────────────────────────────────────────


def has_run(owner: Owner, slot_id: Hashable) -> bool:
    """Has this slot's effect completed at least once? False for unknown slots."""
    return _anchor.has_run.get((owner._id, slot_id), False)


def last_dependencies(owner: Owner, slot_id: Hashable) -> Snapshot | None:
    """The snapshot recorded at the slot's last successful run, or None."""
    return _anchor.last_dependencies.get((owner._id, slot_id))


def pending_count(owner: Owner) -> int:
    """Number of registrations waiting for the next commit. Useful for testing."""
    return len(_anchor.pending[owner._id])


def is_torn_down(owner: Owner) -> bool:
    return _anchor.torn_down[owner._id]

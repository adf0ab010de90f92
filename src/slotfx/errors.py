"""Scheduler errors.

Only misuse of the scheduler is reported with these types. Exceptions raised
by effect bodies and cleanups are the caller's own and propagate unchanged.
"""

from __future__ import annotations


class SchedulerError(RuntimeError):
    """Base class for scheduler contract violations."""


class ArityMismatch(SchedulerError):
    """A slot's dependency sequence changed length between cycles."""

    def __init__(self, slot_id, previous: int, current: int) -> None:
        super().__init__(
            f"dependency arity changed for slot {slot_id!r}: {previous} -> {current}"
        )
        self.slot_id = slot_id
        self.previous = previous
        self.current = current


class DoubleTeardown(SchedulerError):
    """teardown() was called twice for the same owner."""


class OwnerTornDown(SchedulerError):
    """register() or commit() was called after the owner was torn down."""


class ReentrantCommit(SchedulerError):
    """A bookkeeping call overlapped a commit or teardown of the same owner."""


class HookOutsideRender(SchedulerError):
    """use_effect() was called without an active render pass."""

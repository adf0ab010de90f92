"""Dependency snapshots and the should-run predicate.

A snapshot is one of:
- ALWAYS: run on every commit (None is accepted as a spelling of it)
- (): run once, on the first commit
- (a, b, ...): run on the first commit and whenever any element changed

Elements are compared by identity, then equality: a change is
`new is not old and new != old`. No deep copy or deep comparison is made.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Union

from slotfx.errors import ArityMismatch


class _Always:
    """Sentinel type for "run on every commit"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "ALWAYS"

    def __reduce__(self):
        return "ALWAYS"


ALWAYS = _Always()

Snapshot = Union[_Always, tuple]


def snapshot(dependencies) -> Snapshot:
    """Normalize caller-supplied dependencies into an immutable snapshot."""
    if dependencies is None or dependencies is ALWAYS:
        return ALWAYS
    if isinstance(dependencies, (str, bytes)) or not isinstance(dependencies, Sequence):
        raise TypeError(
            f"dependencies must be a sequence, ALWAYS or None, not {type(dependencies).__name__}"
        )
    return tuple(dependencies)


def check_arity(slot_id, previous: Snapshot | None, current: Snapshot) -> None:
    """Raise ArityMismatch if a recorded sequence and a new one differ in length."""
    if previous is None or previous is ALWAYS or current is ALWAYS:
        return
    if len(previous) != len(current):
        raise ArityMismatch(slot_id, len(previous), len(current))


def changed(previous: tuple, current: tuple) -> bool:
    for old, new in zip(previous, current):
        if new is not old and new != old:
            return True
    return False


def should_run(has_run: bool, previous: Snapshot | None, current: Snapshot) -> bool:
    """Decide whether a slot's effect runs this cycle.

    A slot that last ran with ALWAYS has nothing to compare against, so it runs
    when switched to a sequence.
    """
    if not has_run or current is ALWAYS or previous is None or previous is ALWAYS:
        return True
    return changed(previous, current)

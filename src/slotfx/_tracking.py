"""Render tracking and per-owner exclusion.

Uses contextvars to track the render pass in progress so that use_effect()
can address slots by call position without an explicit owner argument.
Each render pass gets its own frame; nested passes for other owners restore
the outer frame when they exit.

Commit and teardown hold the owner's lock for their whole duration. The lock
is only ever acquired without blocking: an overlapping call for the same
owner is a contract violation, not something to wait for.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import TYPE_CHECKING

from slotfx import _anchor
from slotfx.errors import ReentrantCommit

if TYPE_CHECKING:
    from slotfx.owner import Owner


class RenderFrame:
    """One render pass: the owner being rendered and the next hook position."""

    __slots__ = ("owner", "_position")

    def __init__(self, owner: Owner) -> None:
        self.owner = owner
        self._position = 0

    def next_position(self) -> int:
        position = self._position
        self._position += 1
        return position


current_render: contextvars.ContextVar[RenderFrame | None] = contextvars.ContextVar(
    "current_render", default=None
)


@contextmanager
def exclusive(owner: Owner, operation: str):
    """Hold the owner's lock, failing fast if another operation holds it."""
    lock = _anchor.locks[owner._id]
    if not lock.acquire(blocking=False):
        raise ReentrantCommit(f"{operation}() overlaps a commit or teardown of {owner!r}")
    try:
        yield
    finally:
        lock.release()


def is_busy(owner: Owner) -> bool:
    """Is a commit or teardown of this owner in progress?"""
    return _anchor.locks[owner._id].locked()

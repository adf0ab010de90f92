"""Owner — the context that groups effect slots sharing a lifecycle.

An Owner stands for one component instance (or any other unit with a
render/commit/destroy lifecycle). It is a thin handle holding an _id; all
state lives in _anchor, and every method delegates to slotfx.scheduler.
"""

from __future__ import annotations

import threading
import weakref
from typing import Hashable

from slotfx import _anchor, scheduler
from slotfx.deps import ALWAYS


class Owner:
    """A set of effect slots that are committed and torn down together."""

    __slots__ = ("_id", "__weakref__")

    def __init__(self, name: str | None = None) -> None:
        self._id = _anchor.new_id()
        _anchor.owner_names[self._id] = name
        _anchor.slot_order[self._id] = []
        _anchor.pending[self._id] = {}
        _anchor.locks[self._id] = threading.Lock()
        _anchor.torn_down[self._id] = False
        # Anchor entries live exactly as long as the handle.
        weakref.finalize(self, _anchor.forget, self._id)

    @property
    def name(self) -> str | None:
        return _anchor.owner_names[self._id]

    @property
    def torn_down(self) -> bool:
        return scheduler.is_torn_down(self)

    def register(self, slot_id: Hashable, body, dependencies=ALWAYS) -> None:
        scheduler.register(self, slot_id, body, dependencies)

    def commit(self) -> None:
        scheduler.commit(self)

    def teardown(self) -> None:
        scheduler.teardown(self)

    def dispose(self) -> None:
        """Tear down unless that already happened. Safe to call repeatedly."""
        if not self.torn_down:
            self.teardown()

    def has_run(self, slot_id: Hashable) -> bool:
        return scheduler.has_run(self, slot_id)

    def last_dependencies(self, slot_id: Hashable):
        return scheduler.last_dependencies(self, slot_id)

    def __enter__(self) -> Owner:
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()

    def __repr__(self) -> str:
        label = self.name or f"#{self._id}"
        state = "torn down" if _anchor.torn_down[self._id] else "live"
        return f"{type(self).__name__}({label}, {state})"

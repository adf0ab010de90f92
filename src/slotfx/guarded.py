"""Error-tolerant owner. Opt-in — use it where a failing effect must not crash the host."""

import logging

from slotfx.errors import SchedulerError
from slotfx.owner import Owner

logger = logging.getLogger("slotfx.guarded")


class GuardedOwner(Owner):
    """Owner that logs effect and cleanup failures instead of raising them.

    Same API as Owner. Adds:
    - Exception safety: commit/teardown catch errors from user callbacks and log them
    - Degraded operation: the scheduler's bookkeeping is already consistent, so the
      owner keeps working; slots after a failing one simply wait for the next commit
    - Contract violations (SchedulerError) still raise
    """

    __slots__ = ("_on_error", "error_count")

    def __init__(self, name=None, *, on_error=None):
        super().__init__(name)
        self._on_error = on_error
        self.error_count = 0

    def commit(self):
        try:
            super().commit()
        except SchedulerError:
            raise
        except Exception as e:
            self._report(e, "Effect failed while committing %r")

    def teardown(self):
        try:
            super().teardown()
        except SchedulerError:
            raise
        except ExceptionGroup as group:
            for e in group.exceptions:
                self._report(e, "Cleanup failed while tearing down %r")
        except Exception as e:
            self._report(e, "Cleanup failed while tearing down %r")

    def _report(self, error, message):
        self.error_count += 1
        logger.error(message, self, exc_info=error)
        if self._on_error is not None:
            self._on_error(error)

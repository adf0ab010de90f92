"""Background work for effects.

Effect bodies are synchronous: commit() never waits for them to finish their
asynchronous work. run_in_background() starts that work in a daemon thread and
hands back a handle whose cancel() is a ready-made cleanup, so a re-run or a
teardown tells the previous invocation's work to stop.
"""

from __future__ import annotations

from threading import Event, Thread
from typing import Callable


class BackgroundHandle:
    """Cancellation flag and join handle for one piece of background work."""

    __slots__ = ("_cancelled", "_thread")

    def __init__(self):
        self._cancelled = Event()
        self._thread: Thread | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Signal the work to stop. Check .cancelled in your loop."""
        self._cancelled.set()

    def wait_cancelled(self, timeout: float | None = None) -> bool:
        """Sleep until cancelled or timeout. Returns True if cancelled."""
        return self._cancelled.wait(timeout)

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)


def run_in_background(fn: Callable[[BackgroundHandle], None]) -> BackgroundHandle:
    """Run fn(handle) in a daemon thread. Returns the handle.

    Usage:
        def poll(handle):
            while not handle.wait_cancelled(2):
                refresh()

        handle = run_in_background(poll)
        ...
        handle.cancel()
    """
    handle = BackgroundHandle()
    handle._thread = Thread(target=fn, args=(handle,), daemon=True)
    handle._thread.start()
    return handle


def background_effect(fn: Callable[[BackgroundHandle], None]) -> Callable[[], Callable[[], None]]:
    """Wrap background work as an effect body whose cleanup cancels it.

    Usage:
        with render(owner):
            use_effect(background_effect(lambda h: fetch_posts(author, h)), [author])
    """

    def body() -> Callable[[], None]:
        return run_in_background(fn).cancel

    body.__name__ = getattr(fn, "__name__", "background_effect")
    return body

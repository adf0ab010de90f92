"""Textual integration for slotfx. Opt-in — requires textual.

// [LAW:single-enforcer] Guard + NoMatches + thread-marshal enforced here, not at callsites.
// [LAW:locality-or-seam] Textual coupling isolated in this module — core slotfx stays agnostic.
// [LAW:no-shared-mutable-globals] _paused_apps and _ui_threads have a single owner (this module),
//   explicit API (pause/is_safe, attach/detach), documented invariant (id present ↔ inside
//   pause context; id present ↔ attached).
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

# Module-owned pause state — keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()

# id(app) -> thread ident recorded by attach().
_ui_threads: dict[int, int] = {}


def attach(app) -> None:
    """Record the calling thread as app's UI thread.

    Call once from the app thread (e.g. in on_mount). After this, commit() and
    teardown() from any other thread are marshaled through app.call_from_thread.
    """
    _ui_threads[id(app)] = threading.get_ident()


def detach(app) -> None:
    _ui_threads.pop(id(app), None)


@contextmanager
def pause(app):
    """Suspend guarded effects during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def effect(app, body):
    """Wrap an effect body that queries widgets.

    The effect is not due while the app is paused or not running: the
    scheduler leaves the slot untouched and runs it on the first commit after
    the app becomes safe. NoMatches from widget queries in the body or its
    cleanup is swallowed. Other errors propagate to commit()/teardown() as usual.
    """

    def _guarded():
        try:
            cleanup = body()
        except NoMatches:
            return None
        if not callable(cleanup):
            return cleanup
        return lambda: _safe_cleanup(cleanup)

    def _safe_cleanup(cleanup):
        try:
            cleanup()
        except NoMatches:
            pass

    _guarded.ready = lambda: is_safe(app)
    return _guarded


def _on_ui_thread(app, fn, owner):
    ui_thread = _ui_threads.get(id(app))
    if ui_thread is None or threading.get_ident() == ui_thread:
        fn(owner)
    else:
        app.call_from_thread(fn, owner)


def commit(app, owner):
    """commit() that runs on the app's thread, marshaling via call_from_thread."""
    _on_ui_thread(app, lambda o: o.commit(), owner)


def teardown(app, owner):
    """teardown() that runs on the app's thread, marshaling via call_from_thread."""
    _on_ui_thread(app, lambda o: o.teardown(), owner)

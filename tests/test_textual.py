"""Tests for slotfx.textual — Textual integration layer."""

import threading

import pytest
from textual.css.query import NoMatches

from slotfx import GuardedOwner, Owner, render, use_effect
from slotfx import textual as stx


class _MockApp:
    """Minimal mock matching the Textual App interface stx needs."""

    def __init__(self, *, is_running=True):
        self.is_running = is_running
        self._call_from_thread_log = []

    def call_from_thread(self, fn, *args):
        self._call_from_thread_log.append((fn, args))
        return fn(*args)


class TestEffect:
    def test_skips_when_not_running(self):
        app = _MockApp(is_running=False)
        owner = Owner()
        log = []
        with render(owner):
            use_effect(stx.effect(app, lambda: log.append("run")))
        assert log == []

    def test_skips_during_pause(self):
        app = _MockApp()
        owner = Owner()
        log = []
        with stx.pause(app):
            with render(owner):
                use_effect(stx.effect(app, lambda: log.append("run")))
        assert log == []

    def test_fires_when_safe(self):
        app = _MockApp()
        owner = Owner()
        log = []
        with render(owner):
            use_effect(stx.effect(app, lambda: log.append("run")))
        assert log == ["run"]

    def test_catches_nomatch(self):
        """NoMatches from widget queries are silently swallowed."""
        app = _MockApp()
        owner = Owner()

        def _raise_nomatch():
            raise NoMatches("StatusFooter")

        with render(owner):
            use_effect(stx.effect(app, _raise_nomatch))
        owner.teardown()

    def test_catches_nomatch_in_cleanup(self):
        app = _MockApp()
        owner = Owner()

        def _query_on_unmount():
            raise NoMatches("Header")

        with render(owner):
            use_effect(stx.effect(app, lambda: _query_on_unmount))
        owner.teardown()  # should not raise

    def test_propagates_real_errors(self):
        """Non-NoMatches exceptions propagate normally."""
        app = _MockApp()
        owner = Owner()

        def _raise_value_error():
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            with render(owner):
                use_effect(stx.effect(app, _raise_value_error))

    def test_mount_effect_waits_for_running_app(self):
        """A run-once effect registered before the app runs fires once it does."""
        app = _MockApp(is_running=False)
        owner = Owner()
        log = []
        for running in [False, True, True]:
            app.is_running = running
            with render(owner):
                use_effect(stx.effect(app, lambda: log.append("mount")), [])
        assert log == ["mount"]
        assert owner.has_run(0)

    def test_pause_defers_change(self):
        app = _MockApp()
        owner = Owner()
        log = []

        def greet(name):
            def body():
                log.append(f"hello {name}")
                return lambda: log.append(f"bye {name}")

            return body

        with render(owner):
            use_effect(stx.effect(app, greet("Eric")), ["Eric"])
        with stx.pause(app):
            with render(owner):
                use_effect(stx.effect(app, greet("Stan")), ["Stan"])
        assert log == ["hello Eric"]
        with render(owner):
            use_effect(stx.effect(app, greet("Stan")), ["Stan"])
        assert log == ["hello Eric", "bye Eric", "hello Stan"]

    def test_non_callable_return_reported(self):
        app = _MockApp()
        owner = Owner()
        with pytest.raises(TypeError, match="cleanup"):
            with render(owner):
                use_effect(stx.effect(app, lambda: 42))
        assert not owner.has_run(0)

    def test_cleanup_runs_through_wrapper(self):
        app = _MockApp()
        owner = Owner()
        log = []
        with render(owner):
            use_effect(stx.effect(app, lambda: (lambda: log.append("cleanup"))))
        owner.teardown()
        assert log == ["cleanup"]


class TestCommit:
    def test_direct_when_not_attached(self):
        app = _MockApp()
        owner = Owner()
        log = []
        owner.register(0, lambda: log.append("run"))
        stx.commit(app, owner)
        assert log == ["run"]
        assert app._call_from_thread_log == []

    def test_direct_on_ui_thread(self):
        app = _MockApp()
        stx.attach(app)
        try:
            owner = Owner()
            log = []
            owner.register(0, lambda: log.append("run"))
            stx.commit(app, owner)
            assert log == ["run"]
            assert app._call_from_thread_log == []
        finally:
            stx.detach(app)

    def test_thread_marshal(self):
        """Commits from a background thread use call_from_thread."""
        app = _MockApp()
        stx.attach(app)
        try:
            owner = Owner()
            log = []
            owner.register(0, lambda: (lambda: log.append("cleanup")))

            t = threading.Thread(target=stx.commit, args=(app, owner))
            t.start()
            t.join()
            t = threading.Thread(target=stx.teardown, args=(app, owner))
            t.start()
            t.join()

            assert log == ["cleanup"]
            assert len(app._call_from_thread_log) == 2
            assert owner.torn_down
        finally:
            stx.detach(app)

    def test_guarded_owner_logs_instead_of_raising(self):
        app = _MockApp()
        owner = GuardedOwner()
        owner.register(0, lambda: 1 / 0)
        stx.commit(app, owner)
        assert owner.error_count == 1

    def test_guarded_owner_teardown(self):
        app = _MockApp()
        owner = GuardedOwner()

        def _fail():
            raise ValueError("boom")

        owner.register(0, lambda: _fail)
        stx.commit(app, owner)
        stx.teardown(app, owner)
        assert owner.error_count == 1
        assert owner.torn_down


class TestPause:
    def test_pause_restores_on_exception(self):
        app = _MockApp()
        assert stx.is_safe(app)

        with pytest.raises(RuntimeError):
            with stx.pause(app):
                assert not stx.is_safe(app)
                raise RuntimeError("oops")

        # Restored despite exception
        assert stx.is_safe(app)

    def test_pause_does_not_mutate_app(self):
        """// [LAW:no-shared-mutable-globals] pause state lives in the module, not on the app.

        This test prevents regression to setting attributes on external objects.
        """
        app = _MockApp()
        attrs_before = set(vars(app))
        with stx.pause(app):
            attrs_during = set(vars(app))
        stx.attach(app)
        attrs_after = set(vars(app))
        stx.detach(app)
        assert attrs_before == attrs_during, (
            f"pause() added attributes to app: {attrs_during - attrs_before}"
        )
        assert attrs_before == attrs_after

    def test_multiple_apps_independent(self):
        """Pausing one app does not affect another."""
        app_a = _MockApp()
        app_b = _MockApp()
        with stx.pause(app_a):
            assert not stx.is_safe(app_a)
            assert stx.is_safe(app_b)

"""Render passes and position-addressed effects.

Wrapping a render in `with render(owner)` (or decorating the render function
with @component) lets use_effect() find its slot by call position, the way
hooks are addressed in a component function. The pass commits when the block
exits cleanly; a render that raises is discarded and nothing runs.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Callable, ParamSpec, TypeVar

from slotfx import _anchor, scheduler
from slotfx._tracking import RenderFrame, current_render
from slotfx.deps import ALWAYS
from slotfx.errors import HookOutsideRender
from slotfx.owner import Owner

P = ParamSpec("P")
R = TypeVar("R")


@contextmanager
def render(owner: Owner):
    """Context manager for one render pass of owner.

    Usage:
        owner = Owner("profile")
        with render(owner):
            use_effect(lambda: print("mounted"), [])
        # effects committed here
    """
    token = current_render.set(RenderFrame(owner))
    try:
        yield owner
    except BaseException:
        _anchor.pending[owner._id].clear()
        raise
    finally:
        current_render.reset(token)
    scheduler.commit(owner)


def use_effect(body: Callable, dependencies=ALWAYS) -> None:
    """Register an effect at the next position of the current render pass.

    Usage:
        @component
        def greeting(name):
            def announce():
                print(f"hello {name}")
                return lambda: print(f"bye {name}")

            use_effect(announce, [name])
    """
    frame = current_render.get()
    if frame is None:
        raise HookOutsideRender("use_effect() must be called inside render() or a @component")
    scheduler.register(frame.owner, frame.next_position(), body, dependencies)


def component(fn: Callable[P, R]) -> Callable[..., R]:
    """Decorator: turn fn(*args) into a render function called as f(owner, *args).

    Each call is one render pass of owner; its effects commit after fn returns.
    """

    @functools.wraps(fn)
    def wrapper(owner: Owner, *args: P.args, **kwargs: P.kwargs) -> R:
        with render(owner):
            return fn(*args, **kwargs)

    return wrapper

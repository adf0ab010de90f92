"""slotfx: dependency-driven effect scheduling with ordered cleanups."""

from importlib.metadata import version as _version

__version__ = _version("slotfx")

from slotfx.deps import ALWAYS
from slotfx.errors import (
    ArityMismatch,
    DoubleTeardown,
    HookOutsideRender,
    OwnerTornDown,
    ReentrantCommit,
    SchedulerError,
)
from slotfx.owner import Owner
from slotfx.scheduler import commit, has_run, last_dependencies, register, teardown
from slotfx.hooks import component, render, use_effect
from slotfx.guarded import GuardedOwner
from slotfx.background import BackgroundHandle, background_effect, run_in_background
# textual NOT auto-imported — opt-in only

__all__ = [
    "ALWAYS",
    "Owner",
    "GuardedOwner",
    "register",
    "commit",
    "teardown",
    "has_run",
    "last_dependencies",
    "render",
    "use_effect",
    "component",
    "run_in_background",
    "background_effect",
    "BackgroundHandle",
    "SchedulerError",
    "ArityMismatch",
    "DoubleTeardown",
    "OwnerTornDown",
    "ReentrantCommit",
    "HookOutsideRender",
]

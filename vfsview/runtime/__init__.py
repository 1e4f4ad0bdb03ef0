"""Public runtime orchestration entry points.

This package groups the application bootstrap (`run_app`), the interaction
model, and the event loop contracts used by tests and composition code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .loop import RuntimeLoopCallbacks
    from .model import Model


def run_app(*args, **kwargs):
    """Lazily import the app entrypoint to avoid heavy bootstrap on import."""
    from .app import run_app as _run_app

    return _run_app(*args, **kwargs)


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


def __getattr__(name: str):
    if name == "RuntimeLoopCallbacks":
        from . import loop as _loop

        return _loop.RuntimeLoopCallbacks
    if name == "Model":
        from . import model as _model

        return _model.Model
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Model",
    "run_app",
    "RuntimeLoopCallbacks",
    "run_main_loop",
]

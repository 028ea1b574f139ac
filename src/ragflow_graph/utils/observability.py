"""Lightweight observability: render IDs and timing spans."""

import contextvars
import functools
import logging
import time
import uuid

logger = logging.getLogger(__name__)

# Correlates log lines from one graph payload through layout and painting
_render_id: contextvars.ContextVar[str] = contextvars.ContextVar(
    "render_id", default=""
)


def new_render_id() -> str:
    """Generate and set a new render ID for the current context."""
    rid = uuid.uuid4().hex[:12]
    _render_id.set(rid)
    return rid


def get_render_id() -> str:
    """Get the current render ID (empty string if none set)."""
    return _render_id.get()


def timed(func=None, *, level=logging.DEBUG):
    """Decorator that logs function execution time.

    Usage:
        @timed
        def settle(self): ...

        @timed(level=logging.INFO)
        def update(self, data): ...

    Logs: [render_id] module.function took Xms
    """
    def decorator(fn):
        name = f"{fn.__module__}.{fn.__qualname__}"

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            rid = get_render_id()
            prefix = f"[{rid}] " if rid else ""
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                logger.log(level, f"{prefix}{name} took {elapsed_ms:.0f}ms")
        return wrapper

    if func is not None:
        return decorator(func)
    return decorator

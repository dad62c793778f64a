from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import Any, Dict, Iterator

# Copied into every asyncio task at creation, so values bound around a
# gather() are visible in the per-host tasks it spawns.
_fields: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar("hostmonitor_log_fields", default={})


def current_fields() -> Dict[str, Any]:
    return dict(_fields.get())


@contextmanager
def log_context(**values: Any) -> Iterator[Dict[str, Any]]:
    merged = {**_fields.get(), **{k: v for k, v in values.items() if v is not None}}
    token = _fields.set(merged)
    try:
        yield merged
    finally:
        _fields.reset(token)

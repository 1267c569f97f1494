"""Hook registry notified when instrumented code runs slow."""

from __future__ import annotations

import time
from collections import defaultdict
from dataclasses import dataclass
from threading import RLock
from types import MappingProxyType
from typing import Any, Callable, Mapping

from . import logger

HookFn = Callable[["HookEvent"], None]

SLOW_OPERATION = "slowlog.timer.expired"

_LOGGER = logger.get_logger("slowlog.telemetry.hooks")


@dataclass(frozen=True)
class HookEvent:
    name: str
    payload: Mapping[str, Any]
    timestamp: float


class HookHandle:
    """Returned by :meth:`HookRegistry.register`; closing it removes the hook."""

    def __init__(self, registry: "HookRegistry", name: str, fn: HookFn) -> None:
        self._registry = registry
        self._name = name
        self._fn = fn
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if not self._closed:
            self._registry.unregister(self._name, self._fn)
            self._closed = True

    def __enter__(self) -> "HookHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class HookRegistry:
    """Map event names to callbacks; safe to use from several threads."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._hooks: defaultdict[str, list[HookFn]] = defaultdict(list)

    def register(self, name: str, fn: HookFn) -> HookHandle:
        if not isinstance(name, str) or not name:
            raise ValueError("hook name must be a non-empty string")
        if not callable(fn):
            raise TypeError("hook callback must be callable")
        with self._lock:
            self._hooks[name].append(fn)
        return HookHandle(self, name, fn)

    def unregister(self, name: str, fn: HookFn) -> bool:
        with self._lock:
            callbacks = self._hooks.get(name, [])
            if fn not in callbacks:
                return False
            callbacks.remove(fn)
            if not callbacks:
                del self._hooks[name]
            return True

    def dispatch(self, name: str, payload: Mapping[str, Any] | None = None) -> int:
        """Call every hook for ``name`` and return how many were called.

        A hook that raises is logged and skipped; the others still run.
        """

        with self._lock:
            callbacks = tuple(self._hooks.get(name, ()))
        if not callbacks:
            return 0
        event = HookEvent(name, MappingProxyType(dict(payload or {})), time.time())
        for fn in callbacks:
            try:
                fn(event)
            except Exception:
                _LOGGER.exception("hook for %s failed", name)
        return len(callbacks)

    def registered(self) -> Mapping[str, tuple[HookFn, ...]]:
        with self._lock:
            return {name: tuple(fns) for name, fns in self._hooks.items()}

    def clear(self) -> None:
        with self._lock:
            self._hooks.clear()


_REGISTRY = HookRegistry()


def get_registry() -> HookRegistry:
    return _REGISTRY


def register_hook(name: str, fn: HookFn) -> HookHandle:
    return _REGISTRY.register(name, fn)


def unregister_hook(name: str, fn: HookFn) -> bool:
    return _REGISTRY.unregister(name, fn)


def dispatch(name: str, payload: Mapping[str, Any] | None = None) -> int:
    return _REGISTRY.dispatch(name, payload)


def registered_hooks() -> Mapping[str, tuple[HookFn, ...]]:
    return _REGISTRY.registered()


def clear_hooks() -> None:
    _REGISTRY.clear()


__all__ = [
    "HookEvent",
    "HookFn",
    "HookHandle",
    "HookRegistry",
    "SLOW_OPERATION",
    "clear_hooks",
    "dispatch",
    "get_registry",
    "register_hook",
    "registered_hooks",
    "unregister_hook",
]

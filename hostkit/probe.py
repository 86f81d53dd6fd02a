"""Cached lookup of a VM's operating system through the guest agent."""

from __future__ import annotations

import threading
import time
from datetime import timedelta
from typing import Optional, Union

from hostkit import agent

Seconds = Union[int, float, timedelta]


def _seconds(value: Seconds) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


class ProbeManager:
    """Looks up guest OS names and caches them for ``cache_ttl`` seconds."""

    def __init__(self, uri: str, timeout: Seconds, cache_ttl: Seconds) -> None:
        self.uri = uri
        self.timeout_secs = int(_seconds(timeout))
        self.cache_ttl = _seconds(cache_ttl)
        self._cache: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get_os(self, vm: str) -> Optional[str]:
        """Return the OS string for ``vm``, or ``None`` if no probe answered."""
        with self._lock:
            cached = self._cache.get(vm)
        if cached is not None:
            value, stamp = cached
            if time.monotonic() - stamp < self.cache_ttl:
                return value

        for probe in (agent.try_guest_get_osinfo, agent.try_guest_get_os):
            try:
                result = probe(vm, self.timeout_secs)
            except OSError:
                continue
            if result is not None:
                self._store(vm, result)
                return result
        return None

    def _store(self, vm: str, value: str) -> None:
        with self._lock:
            self._cache[vm] = (value, time.monotonic())
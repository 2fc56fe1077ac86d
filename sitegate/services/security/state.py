"""In-process state shared by the gate components.

Each object owns a lock: the WSGI server may run handlers in parallel
threads, and the maintenance job runs in its own thread.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterable, List, Optional, Set


class BlockedIPSet:
    """In-memory mirror of the persisted blocked-IP list."""

    def __init__(self, addresses: Iterable[str] = ()):
        self._lock = threading.Lock()
        self._addresses: Set[str] = set(addresses)

    def __contains__(self, ip: object) -> bool:
        with self._lock:
            return ip in self._addresses

    def __len__(self) -> int:
        with self._lock:
            return len(self._addresses)

    def add(self, ip: str) -> bool:
        with self._lock:
            if ip in self._addresses:
                return False
            self._addresses.add(ip)
            return True

    def discard(self, ip: str) -> bool:
        with self._lock:
            if ip not in self._addresses:
                return False
            self._addresses.discard(ip)
            return True

    def replace(self, addresses: Iterable[str]) -> None:
        with self._lock:
            self._addresses = set(addresses)

    def snapshot(self) -> List[str]:
        with self._lock:
            return sorted(self._addresses)


class SuspicionCounter:
    """Counts suspicious hits per IP, remembering when each IP was last seen."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self._lock = threading.Lock()
        self._hits: Dict[str, int] = {}
        self._last: Dict[str, float] = {}

    def hit(self, ip: str) -> int:
        with self._lock:
            count = self._hits.get(ip, 0) + 1
            self._hits[ip] = count
            self._last[ip] = self.clock()
            return count

    def get(self, ip: str) -> int:
        with self._lock:
            return self._hits.get(ip, 0)

    def reset(self, ip: str) -> None:
        with self._lock:
            self._hits.pop(ip, None)
            self._last.pop(ip, None)

    def prune(self, cutoff: float) -> int:
        """Forget IPs whose last hit is at or before ``cutoff``."""
        with self._lock:
            stale = [ip for ip, last in self._last.items() if last <= cutoff]
            for ip in stale:
                self._hits.pop(ip, None)
                del self._last[ip]
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._hits)


@dataclass(frozen=True)
class RequestRecord:
    url: str
    timestamp: float


class RequestHistory:
    """Per-IP ordered request history, capped at ``max_entries`` per IP."""

    def __init__(self, max_entries: int = 100):
        self.max_entries = max_entries
        self._lock = threading.Lock()
        self._entries: Dict[str, Deque[RequestRecord]] = {}

    def record(self, ip: str, url: str, timestamp: float) -> int:
        with self._lock:
            entries = self._entries.get(ip)
            if entries is None:
                entries = deque(maxlen=self.max_entries)
                self._entries[ip] = entries
            entries.append(RequestRecord(url=url, timestamp=timestamp))
            return len(entries)

    def count_since(self, ip: str, since: float) -> int:
        with self._lock:
            return sum(1 for r in self._entries.get(ip, ()) if r.timestamp > since)

    def entries(self, ip: str) -> List[RequestRecord]:
        with self._lock:
            return list(self._entries.get(ip, ()))

    def last_seen(self, ip: str) -> Optional[float]:
        with self._lock:
            entries = self._entries.get(ip)
            return entries[-1].timestamp if entries else None

    def prune(self, cutoff: float) -> int:
        """Drop entries at or before ``cutoff``; IPs left empty are forgotten."""
        removed = 0
        with self._lock:
            for ip in list(self._entries):
                entries = self._entries[ip]
                while entries and entries[0].timestamp <= cutoff:
                    entries.popleft()
                    removed += 1
                if not entries:
                    del self._entries[ip]
        return removed

    def summary(self) -> Dict[str, Dict[str, float]]:
        """``{ip: {"count": n, "last": ts}}`` for every tracked IP."""
        with self._lock:
            return {
                ip: {"count": len(entries), "last": entries[-1].timestamp}
                for ip, entries in self._entries.items()
                if entries
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class GateState:
    """State objects for one application instance."""

    def __init__(
        self,
        *,
        history_max_entries: int = 100,
        blocked: Iterable[str] = (),
        clock: Callable[[], float] = time.time,
    ):
        self.blocked = BlockedIPSet(blocked)
        self.suspicion = SuspicionCounter(clock)
        self.history = RequestHistory(max_entries=history_max_entries)


__all__ = [
    "BlockedIPSet",
    "GateState",
    "RequestHistory",
    "RequestRecord",
    "SuspicionCounter",
]

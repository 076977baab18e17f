"""Connection identity allocation.

Identities are opaque tokens compared for equality only; clients may truncate
them for display. Each token is random bits followed by a process-start nonce
and a monotonic counter, so two live connections can never share one even if
the random part collides.
"""
import itertools
import secrets
import threading


class IdentityAllocator:
    def __init__(self, random_bytes: int = 4) -> None:
        self._random_bytes = random_bytes
        self._nonce = secrets.token_hex(2)
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def allocate(self) -> str:
        with self._lock:
            n = next(self._counter)
        return f"{secrets.token_hex(self._random_bytes)}{self._nonce}{n:x}"

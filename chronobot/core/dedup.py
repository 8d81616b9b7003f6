"""Deduplication registry.

Tracks which slot identities have already been announced during the
lifetime of the process. This is the only shared mutable state in the
application: every poll thread receives the same registry instance.

Entries are never evicted and nothing is persisted, so a restart
forgets every previous announcement.
"""

import threading
from collections.abc import Iterable


class DedupRegistry:
    """Thread-safe, append-only set of announced slot identities."""

    def __init__(self, identities: Iterable[str] = ()) -> None:
        self._seen: set[str] = set(identities)
        self._lock = threading.Lock()

    def has_seen(self, identity: str) -> bool:
        """Return True if the identity was already marked."""
        with self._lock:
            return identity in self._seen

    def mark_seen(self, identity: str) -> None:
        """Record an identity as announced."""
        with self._lock:
            self._seen.add(identity)

    def claim(self, identity: str) -> bool:
        """Atomically check and mark an identity.

        Returns:
            True if the caller is the first to claim the identity and
            should announce it, False if it was already seen
        """
        with self._lock:
            if identity in self._seen:
                return False
            self._seen.add(identity)
            return True

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)

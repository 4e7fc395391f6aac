"""Session-scoped signature deduplication."""

from __future__ import annotations


class Deduplicator:
    """Remembers every snapshot signature seen during one tracking session."""

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def is_new(self, signature: str) -> bool:
        """Return True and record ``signature`` the first time it is seen."""

        if signature in self._seen:
            return False
        self._seen.add(signature)
        return True

    def reset(self) -> None:
        self._seen.clear()

    def __len__(self) -> int:
        return len(self._seen)


__all__ = ["Deduplicator"]

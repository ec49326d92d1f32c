from __future__ import annotations


class IdentifierRegistry:
    """Icon identifiers already kept during one pass. Membership only grows."""

    def __init__(self) -> None:
        self._seen: dict[str, None] = {}

    def add_if_new(self, identifier: str) -> bool:
        if identifier in self._seen:
            return False
        self._seen[identifier] = None
        return True

    def identifiers(self) -> list[str]:
        return list(self._seen)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._seen

    def __len__(self) -> int:
        return len(self._seen)

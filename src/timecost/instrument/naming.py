from __future__ import annotations

import re
from typing import Iterable


def _normalize_identifier(value: str, fallback: str) -> str:
    cleaned = re.sub(r"[^a-zA-Z0-9_]", "", value)
    if not cleaned:
        return fallback
    if cleaned[0].isdigit():
        return f"_{cleaned}"
    return cleaned


class IdentifierAllocator:
    """Hand out identifiers that collide with nothing spelled in the file.

    Every name returned is remembered, so two insertion sites in the same
    file never share a name either.
    """

    def __init__(self, taken: Iterable[str] = ()) -> None:
        self._taken = set(taken)

    def allocate(self, base: str) -> str:
        base = _normalize_identifier(base, "__start")
        name = base
        counter = 2
        while name in self._taken:
            name = f"{base}{counter}"
            counter += 1
        self._taken.add(name)
        return name

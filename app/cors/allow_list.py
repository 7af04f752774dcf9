from typing import FrozenSet, Iterable, Iterator, Optional, Tuple
from urllib.parse import urlsplit

from app.config import Settings


class AllowListConfigError(ValueError):
    """Raised at startup when the configured origins cannot form a usable allow-list."""


def _is_origin(value: str) -> bool:
    # scheme://host[:port] and nothing else; browsers never send a path or trailing slash
    try:
        parts = urlsplit(value)
        parts.port  # raises on a non-numeric or out-of-range port
    except ValueError:
        return False
    if parts.scheme not in ("http", "https") or not parts.hostname:
        return False
    if parts.username is not None or parts.password is not None:
        return False
    return not (parts.path or parts.query or parts.fragment or value.endswith(("?", "#")))


class AllowList:
    """Immutable, ordered set of origins permitted to make credentialed requests.

    Entries keep their first-seen order and are compared by exact string
    equality only. Instances are never mutated after construction, so one
    instance can be shared by every in-flight request.
    """

    __slots__ = ("_origins", "_lookup")

    def __init__(self, entries: Iterable[Optional[str]]):
        origins = []
        for entry in entries:
            if entry is None:
                continue
            entry = entry.strip()
            if not entry or entry in origins:
                continue
            if not _is_origin(entry):
                raise AllowListConfigError(f"Malformed origin in allow-list: {entry!r}")
            origins.append(entry)
        if not origins:
            raise AllowListConfigError("Allow-list is empty; refusing to start")
        self._origins: Tuple[str, ...] = tuple(origins)
        self._lookup: FrozenSet[str] = frozenset(origins)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AllowList":
        return cls(settings.origin_sources())

    @property
    def origins(self) -> Tuple[str, ...]:
        return self._origins

    def __contains__(self, origin: object) -> bool:
        return origin in self._lookup

    def __iter__(self) -> Iterator[str]:
        return iter(self._origins)

    def __len__(self) -> int:
        return len(self._origins)

    def __repr__(self) -> str:
        return f"AllowList({list(self._origins)!r})"

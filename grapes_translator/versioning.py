"""Maven version ordering and version-range resolution.

Range syntax follows Maven::

    1.0             soft requirement, used as-is
    [1.0]           exactly 1.0
    [1.0,2.0)       1.0 <= x < 2.0
    (,1.0]          x <= 1.0
    [1.2,)          x >= 1.2
    (,1.0],[1.2,)   union of disjoint restrictions, in ascending order

Resolution picks the highest known candidate satisfying the range.  Without
candidate metadata it falls back to the soft requirement, or to the upper
bound of the highest restriction when that bound is inclusive; anything else
is unresolvable.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import structlog

from grapes_translator.exceptions import InvalidVersionRangeError, UnresolvableRangeError

log = structlog.get_logger("grapes_translator.versioning")

# Known qualifiers, oldest first.  "" is a plain release.
_QUALIFIERS = ["alpha", "beta", "milestone", "rc", "snapshot", "", "sp"]
_RELEASE_RANK = _QUALIFIERS.index("")
_QUALIFIER_ALIASES = {"ga": "", "final": "", "release": "", "cr": "rc"}
# Single-letter forms only count when a number follows (1.0-a1, 2.0b3).
_SHORT_QUALIFIERS = {"a": "alpha", "b": "beta", "m": "milestone"}

_TOKEN_RE = re.compile(r"\d+|[^\d.]+")


def _qualifier_rank(qualifier: str) -> tuple[int, str]:
    if qualifier in _QUALIFIERS:
        return (_QUALIFIERS.index(qualifier), "")
    # Unknown qualifiers sort after every known one, then lexically.
    return (len(_QUALIFIERS), qualifier)


# An item is a number, a qualifier, or a nested tuple holding what follows a "-".
Item = int | str | tuple


def _is_null(item: Item) -> bool:
    return item == 0 or item == "" or item == ()


def _trim(items: list[Item]) -> tuple[Item, ...]:
    while items and _is_null(items[-1]):
        items.pop()
    return tuple(items)


def _group_items(group: str) -> list[Item]:
    tokens = _TOKEN_RE.findall(group)
    items: list[Item] = []
    for i, token in enumerate(tokens):
        if token.isdigit():
            items.append(int(token))
            continue
        next_is_number = i + 1 < len(tokens) and tokens[i + 1].isdigit()
        if token in _SHORT_QUALIFIERS and next_is_number:
            token = _SHORT_QUALIFIERS[token]
        items.append(_QUALIFIER_ALIASES.get(token, token))
    return items


def _tokenize(version: str) -> tuple[Item, ...]:
    """``1.0-rc-1`` becomes ``(1, ("rc", (1,)))``: each ``-`` opens a nested list."""
    groups = version.strip().lower().split("-")
    nested: tuple[Item, ...] = ()
    for group in reversed(groups):
        items = list(_trim(_group_items(group)))
        if nested:
            items.append(nested)
        nested = _trim(items)
    return nested


def _compare_to_null(item: Item) -> int:
    if isinstance(item, int):
        return 0 if item == 0 else 1
    if isinstance(item, tuple):
        return _compare_to_null(item[0]) if item else 0
    rank = _qualifier_rank(item)[0]
    return (rank > _RELEASE_RANK) - (rank < _RELEASE_RANK)


def _compare_items(left: Item | None, right: Item | None) -> int:
    if left is None and right is None:
        return 0
    if left is None:
        return -_compare_to_null(right)
    if right is None:
        return _compare_to_null(left)
    if isinstance(left, tuple) and isinstance(right, tuple):
        return _compare_lists(left, right)
    # Numbers beat nested lists, which beat qualifiers.
    kinds = {int: 2, tuple: 1, str: 0}
    lkind, rkind = kinds[type(left)], kinds[type(right)]
    if lkind != rkind:
        return (lkind > rkind) - (lkind < rkind)
    if isinstance(left, int):
        return (left > right) - (left < right)
    lrank, rrank = _qualifier_rank(left), _qualifier_rank(right)
    return (lrank > rrank) - (lrank < rrank)


def _compare_lists(left: tuple[Item, ...], right: tuple[Item, ...]) -> int:
    for i in range(max(len(left), len(right))):
        result = _compare_items(
            left[i] if i < len(left) else None,
            right[i] if i < len(right) else None,
        )
        if result:
            return result
    return 0


@functools.total_ordering
class MavenVersion:
    """A version string with Maven ordering (``1.0 == 1``, ``1.0-rc1 < 1.0 < 1.0-sp``)."""

    __slots__ = ("raw", "items")

    def __init__(self, raw: str) -> None:
        self.raw = raw.strip()
        self.items = _tokenize(self.raw)

    def compare(self, other: MavenVersion) -> int:
        return _compare_lists(self.items, other.items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MavenVersion):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: MavenVersion) -> bool:
        if not isinstance(other, MavenVersion):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash(self.items)

    def __str__(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        return f"MavenVersion({self.raw!r})"


@dataclass(frozen=True)
class Restriction:
    """One interval of a version range; ``None`` bounds are open-ended."""

    lower: MavenVersion | None
    lower_inclusive: bool
    upper: MavenVersion | None
    upper_inclusive: bool

    def contains(self, version: MavenVersion) -> bool:
        if self.lower is not None:
            cmp = version.compare(self.lower)
            if cmp < 0 or (cmp == 0 and not self.lower_inclusive):
                return False
        if self.upper is not None:
            cmp = version.compare(self.upper)
            if cmp > 0 or (cmp == 0 and not self.upper_inclusive):
                return False
        return True


_EVERYTHING = Restriction(None, False, None, False)


def _parse_restriction(spec: str, text: str) -> Restriction:
    lower_inclusive = text.startswith("[")
    upper_inclusive = text.endswith("]")
    inner = text[1:-1].strip()

    if "," not in inner:
        if not inner:
            raise UnresolvableRangeError(spec, "empty restriction")
        if not (lower_inclusive and upper_inclusive):
            raise InvalidVersionRangeError(spec, "a single version must be surrounded by []")
        pinned = MavenVersion(inner)
        return Restriction(pinned, True, pinned, True)

    lower_text, upper_text = (part.strip() for part in inner.split(",", 1))
    if "," in upper_text:
        raise InvalidVersionRangeError(spec, f"too many bounds in '{text}'")
    lower = MavenVersion(lower_text) if lower_text else None
    upper = MavenVersion(upper_text) if upper_text else None

    if lower is not None and upper is not None:
        cmp = upper.compare(lower)
        if cmp < 0:
            raise InvalidVersionRangeError(spec, f"'{text}' defies version ordering")
        if cmp == 0 and not (lower_inclusive and upper_inclusive):
            raise UnresolvableRangeError(spec, f"'{text}' matches no version")
    return Restriction(lower, lower_inclusive, upper, upper_inclusive)


def _overlaps(previous: Restriction, current: Restriction) -> bool:
    if previous.upper is None or current.lower is None:
        return True
    cmp = current.lower.compare(previous.upper)
    return cmp < 0 or (cmp == 0 and previous.upper_inclusive and current.lower_inclusive)


@dataclass(frozen=True)
class VersionRange:
    """A parsed version constraint."""

    spec: str
    restrictions: tuple[Restriction, ...]
    recommended: MavenVersion | None = None

    @classmethod
    def parse(cls, spec: str | None) -> VersionRange:
        if spec is None or not spec.strip():
            raise UnresolvableRangeError(spec, "empty range expression")

        process = spec.strip()
        restrictions: list[Restriction] = []
        while process.startswith(("[", "(")):
            ends = [i for i in (process.find("]"), process.find(")")) if i >= 0]
            if not ends:
                raise InvalidVersionRangeError(spec, "unbounded range")
            end = min(ends)
            restriction = _parse_restriction(spec, process[: end + 1])
            if restrictions and _overlaps(restrictions[-1], restriction):
                raise InvalidVersionRangeError(spec, "ranges overlap")
            restrictions.append(restriction)
            process = process[end + 1 :].strip()
            if process.startswith(","):
                process = process[1:].strip()

        if process:
            if restrictions:
                raise InvalidVersionRangeError(
                    spec, "only fully-qualified sets are allowed in a multiple set"
                )
            return cls(spec, (_EVERYTHING,), MavenVersion(process))
        return cls(spec, tuple(restrictions))

    def contains(self, version: MavenVersion | str) -> bool:
        if isinstance(version, str):
            version = MavenVersion(version)
        if self.recommended is not None:
            return True
        return any(r.contains(version) for r in self.restrictions)

    def fallback_version(self) -> str:
        """Version chosen when no candidate metadata is known."""
        if self.recommended is not None:
            return str(self.recommended)
        highest = self.restrictions[-1]
        if highest.upper is not None and highest.upper_inclusive:
            return str(highest.upper)
        raise UnresolvableRangeError(
            self.spec, "no candidate versions and no inclusive upper bound"
        )


def resolve_version(spec: str | None, candidates: Iterable[str] | None = None) -> str:
    """Narrow *spec* to one concrete version.

    With *candidates*, returns the highest one inside the range (a soft
    requirement is returned as written).  Without candidates, see
    :meth:`VersionRange.fallback_version`.
    """
    version_range = VersionRange.parse(spec)
    known = list(candidates) if candidates else []

    if version_range.recommended is not None or not known:
        resolved = version_range.fallback_version()
    else:
        matching = sorted(
            (MavenVersion(c) for c in known if version_range.contains(c)),
        )
        if not matching:
            raise UnresolvableRangeError(spec, "no available version satisfies the range")
        resolved = str(matching[-1])

    log.debug(
        "versioning.range_resolved",
        range=spec,
        version=resolved,
        candidate_count=len(known),
    )
    return resolved


@runtime_checkable
class VersionResolver(Protocol):
    """Interface for the version-range resolution service."""

    def resolve(
        self,
        version_range: str,
        group_id: str | None = None,
        artifact_id: str | None = None,
    ) -> str: ...


class RangeResolver:
    """Default resolver backed by an in-memory ``group:artifact -> versions`` map."""

    def __init__(self, candidates: Mapping[str, Iterable[str]] | None = None) -> None:
        self._candidates: dict[str, tuple[str, ...]] = {
            key: tuple(versions) for key, versions in (candidates or {}).items()
        }

    def available_versions(
        self, group_id: str | None, artifact_id: str | None
    ) -> tuple[str, ...] | None:
        return self._candidates.get(f"{group_id or ''}:{artifact_id or ''}")

    def resolve(
        self,
        version_range: str,
        group_id: str | None = None,
        artifact_id: str | None = None,
    ) -> str:
        return resolve_version(version_range, self.available_versions(group_id, artifact_id))

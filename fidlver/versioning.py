"""Versions, version ranges and element availability for versioned libraries."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Iterable, Optional

__all__ = [
    "Platform",
    "Version",
    "VersionRange",
    "VersionSet",
    "AvailabilityState",
    "Legacy",
    "Ending",
    "InheritStatus",
    "InheritResult",
    "AvailabilityError",
    "Availability",
    "VersionSelection",
    "intersect",
]

_UNVERSIONED_NAME = "unversioned"
_U32_MAX = 0xFFFFFFFF
_DECIMAL = re.compile(r"\+?[0-9]+", re.ASCII)


class AvailabilityError(Exception):
    """Raised when an availability is used in a state that does not allow it."""


@dataclass(frozen=True, order=True)
class Platform:
    """A named platform that library versions belong to."""

    name: str

    @classmethod
    def unversioned(cls) -> Platform:
        return cls(_UNVERSIONED_NAME)

    @classmethod
    def parse(cls, s: str) -> Platform:
        """Parse a platform name; any non-empty string is accepted."""
        if not s:
            raise ValueError("platform name must not be empty")
        return cls(s)

    def is_unversioned(self) -> bool:
        return self.name == _UNVERSIONED_NAME


@dataclass(frozen=True, order=True)
class Version:
    """A version number, including the special and infinite versions."""

    number: int

    NEG_INF: ClassVar[Version]
    NEXT: ClassVar[Version]
    HEAD: ClassVar[Version]
    LEGACY: ClassVar[Version]
    POS_INF: ClassVar[Version]

    @classmethod
    def from_number(cls, number: int) -> Version:
        """Build a version from a number, rejecting reserved values."""
        if number in (0xFFD00000, 0xFFE00000, 0xFFF00000) or 0 < number < (1 << 31):
            return cls(number)
        raise ValueError(f"invalid version number: {number}")

    @classmethod
    def parse(cls, s: str) -> Version:
        """Parse a version from NEXT, HEAD, LEGACY or a decimal number."""
        named = _NAMED_VERSIONS.get(s)
        if named is not None:
            return named
        if not _DECIMAL.fullmatch(s):
            raise ValueError(f"invalid version: {s!r}")
        number = int(s)
        if number > _U32_MAX:
            raise ValueError(f"invalid version: {s!r}")
        return cls.from_number(number)

    def is_infinite(self) -> bool:
        return self == Version.NEG_INF or self == Version.POS_INF

    def __str__(self) -> str:
        return _SPECIAL_NAMES.get(self.number, str(self.number))


Version.NEG_INF = Version(0)
Version.NEXT = Version(0xFFD00000)
Version.HEAD = Version(0xFFE00000)
Version.LEGACY = Version(0xFFF00000)
Version.POS_INF = Version(_U32_MAX)

_NAMED_VERSIONS = {
    "NEXT": Version.NEXT,
    "HEAD": Version.HEAD,
    "LEGACY": Version.LEGACY,
}

_SPECIAL_NAMES = {
    Version.NEG_INF.number: "-inf",
    Version.NEXT.number: "NEXT",
    Version.HEAD.number: "HEAD",
    Version.LEGACY.number: "LEGACY",
    Version.POS_INF.number: "+inf",
}


@dataclass(frozen=True, order=True)
class VersionRange:
    """A non-empty half-open range of versions [lower, upper_exclusive)."""

    lower: Version
    upper_exclusive: Version

    def __post_init__(self) -> None:
        if not self.lower < self.upper_exclusive:
            raise ValueError("invalid version range")

    def contains(self, version: Version) -> bool:
        return self.lower <= version < self.upper_exclusive

    def __contains__(self, version: Version) -> bool:
        return self.contains(version)


def intersect(
    lhs: Optional[VersionRange], rhs: Optional[VersionRange]
) -> Optional[VersionRange]:
    """Return the overlap of two ranges, or None if either is None or they are disjoint."""
    if lhs is None or rhs is None:
        return None
    lower = max(lhs.lower, rhs.lower)
    upper = min(lhs.upper_exclusive, rhs.upper_exclusive)
    if lower < upper:
        return VersionRange(lower, upper)
    return None


@dataclass(frozen=True, order=True)
class VersionSet:
    """One range, or two ordered non-contiguous ranges, of versions."""

    first: VersionRange
    second: Optional[VersionRange] = None

    def __post_init__(self) -> None:
        if self.second is not None and not self.first.upper_exclusive < self.second.lower:
            raise ValueError("ranges must be in order and noncontiguous")

    @property
    def ranges(self) -> tuple[VersionRange, Optional[VersionRange]]:
        return (self.first, self.second)

    def contains(self, version: Version) -> bool:
        return self.first.contains(version) or (
            self.second is not None and self.second.contains(version)
        )

    def __contains__(self, version: Version) -> bool:
        return self.contains(version)


class AvailabilityState(Enum):
    UNSET = auto()
    INITIALIZED = auto()
    INHERITED = auto()
    NARROWED = auto()
    FAILED = auto()


class Legacy(Enum):
    NOT_APPLICABLE = auto()
    NO = auto()
    YES = auto()


class Ending(Enum):
    NONE = auto()
    REMOVED = auto()
    REPLACED = auto()
    INHERITED = auto()
    SPLIT = auto()


class InheritStatus(Enum):
    OK = auto()
    BEFORE_PARENT_ADDED = auto()
    AFTER_PARENT_DEPRECATED = auto()
    AFTER_PARENT_REMOVED = auto()


@dataclass
class InheritResult:
    """Outcome of inheriting each availability field from a parent."""

    added: InheritStatus = InheritStatus.OK
    deprecated: InheritStatus = InheritStatus.OK
    removed: InheritStatus = InheritStatus.OK

    def is_ok(self) -> bool:
        return all(
            status is InheritStatus.OK
            for status in (self.added, self.deprecated, self.removed)
        )


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise AvailabilityError(message)


def _present(value: Optional[Version], what: str) -> Version:
    if value is None:
        raise AvailabilityError(f"{what} is not set")
    return value


@dataclass(eq=False)
class Availability:
    """When an element is added, deprecated and removed, moving through
    the states unset, initialized, inherited and narrowed."""

    state: AvailabilityState = AvailabilityState.UNSET
    added: Optional[Version] = None
    deprecated: Optional[Version] = None
    removed: Optional[Version] = None
    legacy: Optional[Legacy] = None
    _ending: Optional[Ending] = field(default=None, repr=False)

    @classmethod
    def unbounded(cls) -> Availability:
        """An inherited availability spanning all versions."""
        return cls(
            state=AvailabilityState.INHERITED,
            added=Version.NEG_INF,
            deprecated=None,
            removed=Version.POS_INF,
            legacy=Legacy.NOT_APPLICABLE,
            _ending=Ending.NONE,
        )

    def _expect_state(self, state: AvailabilityState) -> None:
        _require(
            self.state is state,
            f"availability must be {state.name}, not {self.state.name}",
        )

    def is_deprecated(self) -> bool:
        self._expect_state(AvailabilityState.NARROWED)
        return self.deprecated is not None

    def fail(self) -> None:
        self.state = AvailabilityState.FAILED

    def _valid_order(self) -> bool:
        a = self.added if self.added is not None else Version.NEG_INF
        d = self.deprecated if self.deprecated is not None else a
        r = self.removed if self.removed is not None else Version.POS_INF
        return a <= d < r

    def init(
        self,
        added: Optional[Version] = None,
        deprecated: Optional[Version] = None,
        removed: Optional[Version] = None,
        replaced: bool = False,
    ) -> bool:
        """Set the explicit versions; return whether they are in a valid order."""
        self._expect_state(AvailabilityState.UNSET)
        _require(self.legacy is None, "cannot process legacy=true during init")
        _require(not (replaced and removed is None), "cannot set replaced without removed")

        self.added = added
        self.deprecated = deprecated
        self.removed = removed
        if removed is not None:
            self._ending = Ending.REPLACED if replaced else Ending.REMOVED

        valid = self._valid_order()
        self.state = AvailabilityState.INITIALIZED if valid else AvailabilityState.FAILED
        return valid

    def inherit(self, parent: Availability) -> InheritResult:
        """Fill in unset fields from the parent and check consistency with it."""
        self._expect_state(AvailabilityState.INITIALIZED)
        _require(
            parent.state is AvailabilityState.INHERITED,
            "parent availability must be INHERITED",
        )
        p_added = _present(parent.added, "parent added")
        p_removed = _present(parent.removed, "parent removed")
        result = InheritResult()

        if self.added is None:
            self.added = p_added
        elif self.added < p_added:
            result.added = InheritStatus.BEFORE_PARENT_ADDED
        elif self.added >= p_removed:
            result.added = InheritStatus.AFTER_PARENT_REMOVED

        if self.removed is None:
            self.removed = p_removed
        elif self.removed <= p_added:
            result.removed = InheritStatus.BEFORE_PARENT_ADDED
        elif self.removed > p_removed:
            result.removed = InheritStatus.AFTER_PARENT_REMOVED

        if self.deprecated is None:
            pd = parent.deprecated
            if pd is not None and pd < self.removed:
                self.deprecated = max(pd, self.added)
        elif self.deprecated < p_added:
            result.deprecated = InheritStatus.BEFORE_PARENT_ADDED
        elif self.deprecated >= p_removed:
            result.deprecated = InheritStatus.AFTER_PARENT_REMOVED
        elif parent.deprecated is not None and self.deprecated > parent.deprecated:
            result.deprecated = InheritStatus.AFTER_PARENT_DEPRECATED

        if self._ending is None:
            _require(parent._ending is not None, "parent ending is not set")
            self._ending = Ending.NONE if parent._ending is Ending.NONE else Ending.INHERITED
        elif self._ending is Ending.REPLACED and self.removed == p_removed:
            result.removed = InheritStatus.AFTER_PARENT_REMOVED

        _require(self.legacy is None, "legacy is already set")
        if self.removed == p_removed:
            self.legacy = parent.legacy
        else:
            _require(self.removed != Version.POS_INF, "removed must be finite")
            self.legacy = Legacy.NO

        if result.is_ok():
            _require(
                self.legacy is not None and self._ending is not None,
                "inherited availability is incomplete",
            )
            _require(self.added != Version.NEG_INF, "added must be finite")
            _require(self._valid_order(), "inherited versions are out of order")
            self.state = AvailabilityState.INHERITED
        else:
            self.state = AvailabilityState.FAILED
        return result

    def set_legacy(self) -> None:
        """Mark the element as also available at LEGACY after its removal."""
        self._expect_state(AvailabilityState.INHERITED)
        _require(self.legacy is not None, "legacy is not set")
        _require(_present(self.removed, "removed") != Version.POS_INF, "element is never removed")
        self.legacy = Legacy.YES

    def narrow(self, range: VersionRange) -> None:
        """Restrict the availability to a sub-range of it."""
        self._expect_state(AvailabilityState.INHERITED)
        a, b = range.lower, range.upper_exclusive
        added = _present(self.added, "added")
        removed = _present(self.removed, "removed")
        if a == Version.LEGACY:
            _require(b == Version.POS_INF, "a LEGACY range must extend to +inf")
            _require(self.legacy is not Legacy.NO, "element is not available at LEGACY")
        else:
            _require(added <= a and b <= removed, "range is outside the availability")

        if b == Version.POS_INF:
            self._ending = Ending.NONE
        elif removed != b:
            self._ending = Ending.SPLIT
        self.added = a
        self.removed = b
        if self.deprecated is not None:
            self.deprecated = a if a >= self.deprecated else None
        if a <= Version.LEGACY < b:
            self.legacy = Legacy.NOT_APPLICABLE
        else:
            self.legacy = Legacy.NO
        self.state = AvailabilityState.NARROWED

    def range(self) -> VersionRange:
        self._expect_state(AvailabilityState.NARROWED)
        return VersionRange(_present(self.added, "added"), _present(self.removed, "removed"))

    def points(self) -> list[Version]:
        """Return the sorted versions at which the availability changes."""
        pts = {_present(self.added, "added"), _present(self.removed, "removed")}
        if self.deprecated is not None:
            pts.add(self.deprecated)
        if self.legacy is Legacy.YES:
            pts.update((Version.LEGACY, Version.POS_INF))
        return sorted(pts)

    def set(self) -> VersionSet:
        """Return [added, removed), plus [LEGACY, +inf) when legacy applies."""
        first = VersionRange(_present(self.added, "added"), _present(self.removed, "removed"))
        second = (
            VersionRange(Version.LEGACY, Version.POS_INF)
            if self.legacy is Legacy.YES
            else None
        )
        return VersionSet(first, second)

    def ending(self) -> Ending:
        self._expect_state(AvailabilityState.NARROWED)
        if self._ending is None:
            raise AvailabilityError("ending is not set")
        return self._ending


class VersionSelection:
    """The versions selected for each platform being compiled."""

    def __init__(self) -> None:
        self._selected: dict[Platform, frozenset[Version]] = {}

    def insert(self, platform: Platform, versions: Iterable[Version]) -> bool:
        """Select versions for a platform; return False if it was already selected."""
        chosen = frozenset(versions)
        if platform.is_unversioned():
            raise ValueError("cannot select versions for the unversioned platform")
        if not chosen:
            raise ValueError("at least one version must be selected")
        if Version.LEGACY in chosen:
            raise ValueError("LEGACY cannot be selected")
        if len(chosen) > 1 and Version.HEAD not in chosen:
            raise ValueError("selecting several versions requires HEAD among them")
        if platform in self._selected:
            return False
        self._selected[platform] = chosen
        return True

    def lookup(self, platform: Platform) -> Version:
        """Return the version to compile a platform at."""
        if platform.is_unversioned():
            return Version.HEAD
        versions = self._selected[platform]
        if len(versions) == 1:
            return next(iter(versions))
        return Version.LEGACY

    def __contains__(self, platform: Platform) -> bool:
        if platform.is_unversioned():
            raise ValueError("the unversioned platform is never selected")
        return platform in self._selected
# fidlver

Version and availability bookkeeping for interface-definition compilers that
follow the FIDL model of platforms, API levels and `@available` annotations.

## Installation

```
pip install fidlver
```

## What it provides

All names live in `fidlver.versioning`.

- `Platform`: a named platform. `Platform.parse(name)` accepts any non-empty
  name and raises `ValueError` for an empty one; `Platform.unversioned()`
  gives the special `unversioned` platform, and `is_unversioned()` tells it
  apart.
- `Version`: an API level. `Version.parse` accepts `"NEXT"`, `"HEAD"`,
  `"LEGACY"` or a decimal number; `Version.from_number(n)` accepts
  `1 <= n < 2**31` and the numbers of `NEXT`, `HEAD` and `LEGACY`. Both raise
  `ValueError` for anything else. The constants `Version.NEG_INF`,
  `Version.NEXT`, `Version.HEAD`, `Version.LEGACY` and `Version.POS_INF` are
  provided. Versions are ordered and hashable; `str(version)` gives `-inf`,
  `+inf`, `NEXT`, `HEAD`, `LEGACY` or the number, and `is_infinite()` is true
  for the two infinities.
- `VersionRange(lower, upper_exclusive)`: a non-empty half-open range; it
  raises `ValueError` unless `lower < upper_exclusive`. Use
  `contains(version)` or `version in range`.
- `intersect(lhs, rhs)`: the overlap of two optional ranges, or `None` when
  either is `None` or they do not overlap.
- `VersionSet(first, second=None)`: one range, optionally followed by a
  second range that starts strictly after the first ends (otherwise
  `ValueError`). `ranges` gives both as a tuple; `contains(version)` and
  `in` test membership.
- `Availability`: tracks one element's availability through the stages of
  `AvailabilityState`:
  - `init(added=None, deprecated=None, removed=None, replaced=False)` sets
    the element's own versions and returns whether they are in order;
  - `inherit(parent)` fills in unset versions from an inherited parent
    (for example `Availability.unbounded()`) and returns an `InheritResult`;
  - `set_legacy()` marks a removed element as also available at `LEGACY`;
  - `narrow(range)` restricts it to one `VersionRange`.

  After narrowing, `range()`, `ending()` (an `Ending`) and `is_deprecated()`
  describe the result. `points()` returns the sorted list of versions at which
  the availability changes, and `set()` the `VersionSet` it covers. `fail()`
  moves it to the failed state. Calling a step in the wrong state raises
  `AvailabilityError`.
- `InheritResult` and `InheritStatus`: the outcome of `inherit`, one status
  each for `added`, `deprecated` and `removed`; `is_ok()` is true when all
  three are `OK`.
- `VersionSelection`: the versions chosen for each platform.
  `insert(platform, versions)` returns `False` if the platform was already
  selected and raises `ValueError` for the unversioned platform, an empty
  selection, a selection containing `LEGACY`, or several versions without
  `HEAD`. `lookup(platform)` gives the single selected version, `LEGACY` when
  several were selected, and `HEAD` for the unversioned platform.
  `platform in selection` tests whether a platform was selected.

## Example

```python
from fidlver.versioning import Availability, Version, VersionRange

parent = Availability.unbounded()
child = Availability()
child.init(added=Version.parse("2"), removed=Version.parse("5"))

result = child.inherit(parent)
assert result.is_ok()

child.narrow(VersionRange(Version.parse("2"), Version.parse("5")))
print(child.range().contains(Version.parse("3")))  # True
```

## What it does not do

This package only models versions and availabilities. It does not read or
parse interface-definition files, resolve `@available` attributes, compile
libraries or produce any output format, and it has no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```
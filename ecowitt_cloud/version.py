"""
Firmware version ordering.

Ecowitt version strings look like 'V2.3.2': an optional 'V' (either case)
followed by dot separated numeric segments. Comparison is numeric, segment
by segment, with missing trailing segments counting as 0 so that
'V2.3' == 'V2.3.0'. Textual tags ('beta', 'rc1', ..) are not part of the
vendor numbering scheme and are rejected as malformed.
"""

import enum


class VersionError(ValueError):
    """The version string doesn't follow the 'V<int>[.<int>...]' layout"""

    def __init__(self, version: str, reason: str):
        self.version = version
        super().__init__(f"Malformed version '{version}': {reason}")


class Ordering(enum.IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


def versiontuple(version: str, /) -> tuple[int, ...]:
    """
    helper for version checking, comparisons, etc
    """
    _version = version.strip()
    if _version[:1] in ("V", "v"):
        _version = _version[1:]
    if not _version:
        raise VersionError(version, "no numeric segments")
    segments = []
    for segment in _version.split("."):
        # isdigit would also accept unicode digits like '²'
        if not (segment.isascii() and segment.isdigit()):
            raise VersionError(version, f"segment '{segment}' is not numeric")
        segments.append(int(segment))
    return tuple(segments)


def version_key(version: str, /) -> tuple[int, ...]:
    """Sort key where padding-equal versions ('V2.3', 'V2.3.0') compare equal."""
    segments = list(versiontuple(version))
    while segments and not segments[-1]:
        segments.pop()
    return tuple(segments)


def compare(a: str, b: str, /) -> Ordering:
    key_a = version_key(a)
    key_b = version_key(b)
    if key_a < key_b:
        return Ordering.LESS
    if key_a > key_b:
        return Ordering.GREATER
    return Ordering.EQUAL


def max_version(versions, /) -> str | None:
    """
    Returns the greatest version in the iterable. Among padding-equal
    versions the first one encountered wins. None if the iterable is empty.
    """
    highest = None
    highest_key = None
    for version in versions:
        key = version_key(version)
        if (highest_key is None) or (key > highest_key):
            highest = version
            highest_key = key
    return highest

from dataclasses import dataclass
from typing import Final

from .errors import VersionParseError

_FIELD_MAX: Final[int] = 0xFFFF
_MAX_SEGMENTS: Final[int] = 4
_MAX_SEGMENT_DIGITS: Final[int] = len(str(_FIELD_MAX))


def _parse_segment(text: str, segment: str) -> int:
    if not segment:
        raise VersionParseError(text, "empty segment")
    # isdigit() alone would accept non-ASCII digits such as "²".
    if not (segment.isascii() and segment.isdigit()):
        raise VersionParseError(text, f"segment {segment!r} is not a number")
    digits = segment.lstrip("0")
    if len(digits) > _MAX_SEGMENT_DIGITS:
        raise VersionParseError(text, f"segment {segment!r} exceeds {_FIELD_MAX}")
    value = int(digits or "0")
    if value > _FIELD_MAX:
        raise VersionParseError(text, f"segment {segment!r} exceeds {_FIELD_MAX}")
    return value


@dataclass(frozen=True, slots=True, order=True)
class Version:
    """A four-part Visual Studio version number.

    Ordering compares fields from most to least significant.

    Attributes:
        major: Major version (e.g. 16 for Visual Studio 2019).
        minor: Minor version.
        revision: Revision number.
        build: Build number.
    """

    major: int
    minor: int = 0
    revision: int = 0
    build: int = 0

    def __post_init__(self) -> None:
        for name in ("major", "minor", "revision", "build"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise VersionParseError(value, f"{name} must be an integer")
            if not 0 <= value <= _FIELD_MAX:
                raise VersionParseError(value, f"{name} must be within 0..{_FIELD_MAX}")

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parses a dotted version string with one to four segments.

        Missing trailing segments default to zero; segments that are present but
        invalid are errors.

        Args:
            text: Version string such as "16.0" or "17.8.34330.188".

        Returns:
            The parsed version.

        Raises:
            VersionParseError: If the text is empty, has more than four segments, or
                contains a segment that is not an unsigned 16-bit integer.
        """
        if not isinstance(text, str):
            raise VersionParseError(text, "expected a string")
        if not text:
            raise VersionParseError(text, "empty string")
        segments = text.split(".")
        if len(segments) > _MAX_SEGMENTS:
            raise VersionParseError(text, f"more than {_MAX_SEGMENTS} segments")
        values = [_parse_segment(text, s) for s in segments]
        values += [0] * (_MAX_SEGMENTS - len(values))
        return cls(*values)

    @classmethod
    def coerce(cls, value: "Version | str | None") -> "Version | None":
        """Accepts a Version, a version string or None."""
        if value is None or isinstance(value, Version):
            return value
        return cls.parse(value)

    def format(self) -> str:
        return f"{self.major}.{self.minor}.{self.revision}.{self.build}"

    def __str__(self) -> str:
        return self.format()

"""Dotted version identifiers.

Versions in a history file and in component tags look like ``2.10.0``,
optionally with a fourth build segment (``1.0.0.1``) or a pre-release
label (``1.0.0-beta01``). Only fully numeric segments are accepted;
anything else fails immediately rather than being parsed on a best
effort basis.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field

from history_py.exceptions import InvalidVersionError

MAX_SEGMENTS = 4

_VERSION_PATTERN = re.compile(
    r"""
    ^
    (?P<numbers>\d+(?:\.\d+)*)
    (?:-(?P<prerelease>[0-9A-Za-z][0-9A-Za-z.\-]*))?
    $
    """,
    re.VERBOSE,
)


def is_prerelease_text(text: str) -> bool:
    """Return True if a version string denotes a pre-stable (0.x) version.

    This looks at the text only, so it can be asked about tag names
    that are never going to be parsed.
    """
    return text.startswith("0.")


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class StructuredVersion:
    """An immutable ``major.minor.patch[.build][-label]`` version.

    Ordering is lexicographic over the numeric segments, with shorter
    versions padded with zeros. A pre-release sorts before the final
    release with the same numbers.
    """

    segments: tuple[int, ...]
    prerelease: str | None = None
    _text: str = field(default="", repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.segments or len(self.segments) > MAX_SEGMENTS:
            raise InvalidVersionError(
                ".".join(str(s) for s in self.segments),
                f"expected 1 to {MAX_SEGMENTS} segments",
            )
        if any(s < 0 for s in self.segments):
            raise InvalidVersionError(
                ".".join(str(s) for s in self.segments), "negative segment"
            )

    @classmethod
    def parse(cls, text: str) -> StructuredVersion:
        """Parse a version string.

        Args:
            text: Version string such as ``1.2.0`` or ``2.0.0-beta01``

        Returns:
            Parsed version

        Raises:
            InvalidVersionError: If the text is not a dotted numeric version
        """
        match = _VERSION_PATTERN.match(text.strip())
        if not match:
            raise InvalidVersionError(text)

        segments = tuple(int(part) for part in match.group("numbers").split("."))
        if len(segments) > MAX_SEGMENTS:
            raise InvalidVersionError(text, f"more than {MAX_SEGMENTS} segments")

        return cls(
            segments=segments,
            prerelease=match.group("prerelease"),
            _text=text.strip(),
        )

    @property
    def major(self) -> int:
        return self.segments[0]

    @property
    def minor(self) -> int:
        return self._segment(1)

    @property
    def patch(self) -> int:
        return self._segment(2)

    @property
    def is_stable(self) -> bool:
        """True for versions with a non-zero major and no pre-release label."""
        return self.major != 0 and self.prerelease is None

    def _segment(self, index: int) -> int:
        return self.segments[index] if index < len(self.segments) else 0

    def _sort_key(self) -> tuple[tuple[int, ...], int, str]:
        padded = self.segments + (0,) * (MAX_SEGMENTS - len(self.segments))
        # Final releases sort after any pre-release of the same numbers
        if self.prerelease is None:
            return padded, 1, ""
        return padded, 0, self.prerelease

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StructuredVersion):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, StructuredVersion):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __str__(self) -> str:
        if self._text:
            return self._text
        text = ".".join(str(s) for s in self.segments)
        if self.prerelease:
            text = f"{text}-{self.prerelease}"
        return text

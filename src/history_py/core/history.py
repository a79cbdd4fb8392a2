"""Version history files.

A history file is Markdown with a title and one section per release::

    # Version history

    ## Version 1.2.0, released 2020-03-04

    - [Commit 1a2b3c4](https://github.com/org/repo/commit/1a2b3c4...): Fix paging

The file is partly maintained by hand. Merging computed releases only
ever inserts sections for versions that are not present yet; existing
sections, including ones this module does not understand, are kept
byte for byte.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

from history_py.core.commits import format_commit_line
from history_py.core.version import StructuredVersion
from history_py.exceptions import HistoryFileError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from history_py.core.releases import Release

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Version history"
EMPTY_RELEASE_NOTE = "No API surface changes; just dependency updates."

_BOM = "\ufeff"

_SECTION_HEADING = re.compile(r"^## ")
_VERSION_HEADING = re.compile(
    r"^## Version (?P<version>\S+?)(?:, released (?P<date>\d{4}-\d{2}-\d{2}))?\s*$"
)


@dataclass
class HistorySection:
    """A ``## `` heading and the lines up to the next one.

    ``version`` is None for sections whose heading is not a version heading;
    such sections are carried through unchanged.
    """

    lines: list[str]
    version: StructuredVersion | None = None

    @property
    def heading(self) -> str:
        return self.lines[0].rstrip("\r\n")

    def render(self) -> str:
        return "".join(self.lines)


@dataclass
class HistoryFile:
    """In-memory form of a history file.

    Attributes:
        header: Title line and anything before the first section
        sections: Sections in file order
        newline: Line terminator used when synthesizing new lines
    """

    header: list[str]
    sections: list[HistorySection] = field(default_factory=list)
    newline: str = "\n"

    @classmethod
    def parse(cls, text: str) -> HistoryFile:
        """Parse history file text.

        Raises:
            HistoryFileError: If the text does not start with a ``# `` title
            InvalidVersionError: If a version heading names a malformed version
        """
        # A byte order mark is set aside for the title check and kept in the header
        bom = _BOM if text.startswith(_BOM) else ""
        lines = text[len(bom):].splitlines(keepends=True)

        title_index = next((i for i, line in enumerate(lines) if line.strip()), None)
        if title_index is None or not lines[title_index].startswith("# "):
            raise HistoryFileError("History file must start with a '# ' title line")

        newline = _detect_newline(lines)
        header: list[str] = []
        sections: list[HistorySection] = []
        for line in lines:
            if _SECTION_HEADING.match(line):
                sections.append(HistorySection([line], _heading_version(line)))
            elif sections:
                sections[-1].lines.append(line)
            else:
                header.append(line)

        if bom:
            header[0] = bom + header[0]

        return cls(header=header, sections=sections, newline=newline)

    @classmethod
    def load(cls, path: Path) -> HistoryFile:
        """Load a history file from disk."""
        # Bytes rather than read_text, which would translate CRLF line endings
        try:
            text = path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise HistoryFileError(f"Could not read history file {path}: {e}") from e
        return cls.parse(text)

    @staticmethod
    def create_stub(path: Path, title: str = DEFAULT_TITLE) -> bool:
        """Write a minimal history file if none exists.

        Returns:
            True if a file was created
        """
        if path.exists():
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(f"# {title}\n\n".encode())
        logger.info("Created history file %s", path)
        return True

    @property
    def versions(self) -> list[StructuredVersion]:
        return [s.version for s in self.sections if s.version is not None]

    def has_version(self, version: StructuredVersion) -> bool:
        return version in self.versions

    def merge_releases(
        self,
        releases: Iterable[Release],
        *,
        today: date | None = None,
        include_hashes: bool = True,
        commit_url_template: str | None = None,
        empty_release_note: str = EMPTY_RELEASE_NOTE,
    ) -> list[StructuredVersion]:
        """Insert sections for releases whose version is not present yet.

        Releases are expected newest first, as produced by group_releases.
        They are inserted oldest first at the top, so the file stays in
        reverse chronological order. Existing sections are never modified.

        Args:
            releases: Computed releases, newest first
            today: Date used for the unreleased bucket (default: today)
            include_hashes: Show short hashes in commit lines
            commit_url_template: Optional commit URL with a ``{sha}`` placeholder
            empty_release_note: Line written for a tagged release with no commits

        Returns:
            Versions that were inserted, in insertion order
        """
        today = today or date.today()
        inserted: list[StructuredVersion] = []

        for release in reversed(list(releases)):
            if self.has_version(release.version):
                logger.debug("Keeping existing section for %s", release.version)
                continue
            if not release.is_released and not release.commits:
                logger.debug("No unreleased changes for %s", release.version)
                continue

            release_date = release.release_date.date() if release.release_date else today
            body = [
                format_commit_line(
                    commit,
                    include_hash=include_hashes,
                    commit_url_template=commit_url_template,
                )
                for commit in release.commits
            ] or [empty_release_note]

            heading = f"## Version {release.version}, released {release_date.isoformat()}"
            self._insert_section([heading, "", *body, ""], release.version)
            inserted.append(release.version)

        return inserted

    def _insert_section(self, lines: list[str], version: StructuredVersion) -> None:
        nl = self.newline
        section = HistorySection([line + nl for line in lines], version)

        # The new section must start on a fresh line after a blank one
        preceding = self.header
        if preceding and not preceding[-1].endswith(("\n", "\r")):
            preceding[-1] += nl
        if preceding and preceding[-1].strip():
            preceding.append(nl)

        self.sections.insert(0, section)

    def render(self) -> str:
        return "".join(self.header) + "".join(s.render() for s in self.sections)

    def save(self, path: Path) -> None:
        """Write the whole file back, replacing the previous content."""
        path.write_bytes(self.render().encode("utf-8"))


def _heading_version(line: str) -> StructuredVersion | None:
    match = _VERSION_HEADING.match(line.rstrip("\r\n"))
    if not match:
        return None
    return StructuredVersion.parse(match.group("version"))


def _detect_newline(lines: list[str]) -> str:
    for line in lines:
        if line.endswith("\r\n"):
            return "\r\n"
        if line.endswith("\n"):
            return "\n"
    return "\n"

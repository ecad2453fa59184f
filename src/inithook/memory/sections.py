"""Section scanner and patcher for skill files.

A skill file is plain markdown. Every line matching ``^(#{1,6})\\s+(.+)$``
opens a section that runs until the next header line (of any level) or the
end of the document. Text before the first header belongs to no section.

Both functions are pure: they take a document string and return new data,
leaving persistence to ``SkillStore``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

HEADER_RE = re.compile(r"^(#{1,6})\s+(.+)$")

MIN_LEVEL = 1
MAX_LEVEL = 6


@dataclass(frozen=True)
class Section:
    """A titled span of a document, computed at scan time."""

    title: str
    level: int
    content: str
    start_line: int
    end_line: int

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def scan_sections(text: str) -> list[Section]:
    """Split a document into its sections, in document order."""
    lines = normalize_newlines(text).split("\n")
    last = len(lines) - 1
    sections: list[Section] = []

    open_title: str | None = None
    open_level = 0
    open_start = 0

    for i, line in enumerate(lines):
        match = HEADER_RE.match(line)
        if not match:
            continue
        if open_title is not None:
            sections.append(
                Section(
                    title=open_title,
                    level=open_level,
                    content="\n".join(lines[open_start + 1 : i]).strip(),
                    start_line=open_start,
                    end_line=i - 1,
                )
            )
        open_title = match.group(2).strip()
        open_level = len(match.group(1))
        open_start = i

    if open_title is not None:
        sections.append(
            Section(
                title=open_title,
                level=open_level,
                content="\n".join(lines[open_start + 1 :]).strip(),
                start_line=open_start,
                end_line=last,
            )
        )

    return sections


def find_section(sections: list[Section], title: str) -> Section | None:
    """Return the first section whose title matches, ignoring case."""
    wanted = title.strip().lower()
    for section in sections:
        if section.title.lower() == wanted:
            return section
    return None


def valid_level(level: object) -> bool:
    return isinstance(level, int) and not isinstance(level, bool) and MIN_LEVEL <= level <= MAX_LEVEL


def titles(sections: list[Section]) -> list[str]:
    return [s.title for s in sections]


def render_block(title: str, content: str, level: int) -> str:
    """Header line, one blank line, then the body."""
    return f"{'#' * level} {title.strip()}\n\n{normalize_newlines(content).strip()}"


def upsert_section(text: str, title: str, content: str, level: int = 3) -> str:
    """Replace the section called ``title`` or append it at the end.

    The first case-insensitive title match is replaced in place: its header
    line through its last line are swapped for the new block and every other
    line is kept verbatim. With no match the block is appended after one
    blank line. Calling this twice with the same arguments yields the same
    text as calling it once.
    """
    if not valid_level(level):
        raise ValueError(f"header level must be {MIN_LEVEL}-{MAX_LEVEL}, got {level!r}")

    text = normalize_newlines(text)
    block = render_block(title, content, level)

    # A terminating newline is not part of the last section's span.
    terminated = text.endswith("\n")
    body = text[:-1] if terminated else text

    existing = find_section(scan_sections(body), title)
    if existing is None:
        head = text.rstrip()
        if not head:
            return block + "\n"
        return f"{head}\n\n{block}\n"

    lines = body.split("\n")
    patched = lines[: existing.start_line] + [block] + lines[existing.end_line + 1 :]
    result = "\n".join(patched)
    return result + "\n" if terminated else result

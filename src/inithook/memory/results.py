"""Tagged results returned by ``SkillStore`` operations.

Each variant knows how to render itself as a JSON-able payload. The server
turns ``is_error`` variants into tool results flagged ``isError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass
class Ok:
    """Successful call. ``text`` is sent verbatim when set, else ``payload``."""

    payload: dict[str, Any] = field(default_factory=dict)
    text: str | None = None

    is_error = False

    def to_payload(self) -> dict[str, Any]:
        return dict(self.payload)


@dataclass
class NotFound:
    """No section with the requested title."""

    section: str
    available: list[str]

    is_error = True

    def to_payload(self) -> dict[str, Any]:
        return {"error": "section_not_found", "section": self.section, "available": self.available}


@dataclass
class NoDocument:
    """The skill file does not exist yet."""

    path: str
    hint: str = "No skill file found. Use memory_save to create one."

    is_error = True

    def to_payload(self) -> dict[str, Any]:
        return {"error": "no_skill_file", "path": self.path, "hint": self.hint}


@dataclass
class InvalidLevel:
    """Header level outside 1-6."""

    level: Any

    is_error = True

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": "invalid_level",
            "level": self.level,
            "hint": "Header level must be an integer from 1 to 6.",
        }


Result = Union[Ok, NotFound, NoDocument, InvalidLevel]

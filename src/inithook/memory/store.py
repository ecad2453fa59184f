"""Skill file store: one markdown document per agent.

The skill file is the memory store. ``SkillStore`` resolves the file for an
agent, reads it before every mutation and writes it back afterwards. Each
operation returns a tagged result from ``inithook.memory.results``.

Read-modify-write cycles are not serialized. Two processes saving to the same
skill file at once can lose an update.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Callable

from inithook.config import HookConfig
from inithook.memory.results import InvalidLevel, NoDocument, NotFound, Ok, Result
from inithook.memory.sections import (
    find_section,
    scan_sections,
    titles,
    upsert_section,
    valid_level,
)

logger = logging.getLogger(__name__)

SKILL_SUFFIX = ".skill.md"
MAX_NAME_LENGTH = 64

FRESH_HINT = "No skill file found. You are starting fresh. Use memory_save to persist memories."


def sanitize_name(name: str) -> str:
    """Keep only ``[A-Za-z0-9_-]`` and cap the length."""
    return re.sub(r"[^a-zA-Z0-9_-]", "", name)[:MAX_NAME_LENGTH]


class SkillStore:
    """Read/write access to agent skill files."""

    def __init__(self, config: HookConfig, clock: Callable[[], datetime] = datetime.now) -> None:
        self.config = config
        self._clock = clock

    # ── Paths ─────────────────────────────────────────────────

    def path_for(self, agent_name: str | None = None) -> Path:
        """Skill file for an agent, or the default file when no usable name is given."""
        slug = sanitize_name(agent_name) if agent_name else ""
        filename = f"{slug}{SKILL_SUFFIX}" if slug else self.config.skill_file
        return (self.config.skill_dir / filename).resolve()

    def read(self, agent_name: str | None = None) -> str | None:
        """Full text of the skill file, or None if it does not exist."""
        path = self.path_for(agent_name)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    # ── Tools ─────────────────────────────────────────────────

    def load(self, agent_name: str | None = None, section: str | None = None) -> Result:
        """Return the whole skill file, or one section of it."""
        path = self.path_for(agent_name)
        text = self.read(agent_name)
        if text is None:
            return NoDocument(path=str(path))

        if not section:
            return Ok(text=text)

        sections = scan_sections(text)
        found = find_section(sections, section)
        if found is None:
            return NotFound(section=section, available=titles(sections))
        return Ok({"section": found.title, "content": found.content, "level": found.level})

    def save(
        self,
        section: str,
        content: str,
        level: int | None = None,
        agent_name: str | None = None,
    ) -> Result:
        """Create or replace a section, then write the file."""
        if level is None:
            level = self.config.default_level
        if not valid_level(level):
            return InvalidLevel(level=level)

        path = self.path_for(agent_name)
        text = self.read(agent_name) or ""

        existed = find_section(scan_sections(text), section) is not None
        self._write(path, upsert_section(text, section, content, level))

        action = "updated" if existed else "created"
        logger.info("Saved section '%s' to %s (%s)", section, path, action)
        return Ok({"success": True, "path": str(path), "section": section, "action": action})

    def list_sections(self, agent_name: str | None = None) -> Result:
        """Outline of the skill file: title, level and line span per section."""
        path = self.path_for(agent_name)
        text = self.read(agent_name)
        if text is None:
            return NoDocument(path=str(path))

        return Ok(
            {
                "path": str(path),
                "sections": [
                    {"title": s.title, "level": s.level, "lines": s.line_count}
                    for s in scan_sections(text)
                ],
            }
        )

    def init(self, agent_name: str | None = None) -> Result:
        """Constructor: return the full skill file as boot context."""
        path = self.path_for(agent_name)
        text = self.read(agent_name)
        if text is None:
            return Ok({"initialized": True, "memory": None, "hint": FRESH_HINT, "path": str(path)})

        count = len(scan_sections(text))
        logger.info("Loaded %d sections from %s", count, path)
        return Ok(text=f"=== MEMORY LOADED ({count} sections) ===\n\n{text}\n\n=== END MEMORY ===")

    def destroy(self, agent_name: str | None = None, final_notes: str | None = None) -> Result:
        """Destructor: persist last-minute notes under a timestamped section."""
        if not final_notes:
            return Ok({"destroyed": True, "notes": "no final notes to save"})

        path = self.path_for(agent_name)
        text = self.read(agent_name) or ""
        stamp = self._clock().strftime("%Y-%m-%d %H:%M:%S")
        self._write(path, upsert_section(text, f"Session Notes ({stamp})", final_notes, 3))

        logger.info("Saved final session notes to %s", path)
        return Ok({"destroyed": True, "path": str(path), "saved": True})

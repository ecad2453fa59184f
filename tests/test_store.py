"""Tests for the skill file store."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from inithook.config import HookConfig
from inithook.memory.results import InvalidLevel, NoDocument, NotFound, Ok
from inithook.memory.store import SkillStore, sanitize_name


@pytest.fixture
def config(tmp_path: Path) -> HookConfig:
    return HookConfig(skill_dir=tmp_path / "skills", skill_file="default.skill.md")


@pytest.fixture
def store(config: HookConfig) -> SkillStore:
    return SkillStore(config, clock=lambda: datetime(2026, 10, 18, 9, 30, 0))


class TestSanitizeName:
    def test_keeps_allowed(self):
        assert sanitize_name("agent_01-beta") == "agent_01-beta"

    def test_strips_path_characters(self):
        assert sanitize_name("../../etc/passwd") == "etcpasswd"

    def test_strips_spaces_and_unicode(self):
        assert sanitize_name("my agent ✨") == "myagent"

    def test_length_capped(self):
        assert len(sanitize_name("a" * 200)) == 64


class TestPathFor:
    def test_default_file(self, store: SkillStore, config: HookConfig):
        assert store.path_for() == (config.skill_dir / "default.skill.md").resolve()

    def test_agent_file(self, store: SkillStore, config: HookConfig):
        assert store.path_for("scout") == (config.skill_dir / "scout.skill.md").resolve()

    def test_unusable_name_falls_back_to_default(self, store: SkillStore, config: HookConfig):
        assert store.path_for("!!!") == (config.skill_dir / "default.skill.md").resolve()

    def test_stays_inside_skill_dir(self, store: SkillStore, config: HookConfig):
        path = store.path_for("../../outside")
        assert path.parent == config.skill_dir.resolve()


class TestSave:
    def test_creates_directory_and_file(self, store: SkillStore):
        result = store.save("Notes", "hello", agent_name="scout")
        assert isinstance(result, Ok)
        assert result.payload["action"] == "created"
        assert result.payload["success"] is True
        path = Path(result.payload["path"])
        assert path.read_text(encoding="utf-8") == "### Notes\n\nhello\n"

    def test_updates_existing(self, store: SkillStore):
        store.save("Notes", "hello")
        result = store.save("notes", "goodbye")
        assert result.payload["action"] == "updated"
        assert store.read() == "### notes\n\ngoodbye\n"

    def test_created_when_title_only_appears_in_body(self, store: SkillStore):
        store.save("Log", "mentions Recent Work in passing")
        result = store.save("Recent Work", "- Did X")
        assert result.payload["action"] == "created"

    def test_idempotent_write(self, store: SkillStore):
        store.save("Skills", "- Python", level=2)
        first = store.read()
        store.save("Skills", "- Python", level=2)
        assert store.read() == first

    def test_default_level_from_config(self, config: HookConfig):
        config.default_level = 2
        s = SkillStore(config)
        s.save("Skills", "- Python")
        assert s.read().startswith("## Skills")

    @pytest.mark.parametrize("level", [0, 7, True, "2"])
    def test_invalid_level(self, store: SkillStore, level):
        result = store.save("Notes", "x", level=level)
        assert isinstance(result, InvalidLevel)
        assert result.is_error
        assert store.read() is None

    def test_agents_are_separate(self, store: SkillStore):
        store.save("Notes", "a", agent_name="alpha")
        store.save("Notes", "b", agent_name="beta")
        assert "a" in store.read("alpha")
        assert "b" in store.read("beta")
        assert store.read() is None


class TestLoad:
    def test_no_document(self, store: SkillStore):
        result = store.load()
        assert isinstance(result, NoDocument)
        payload = result.to_payload()
        assert payload["error"] == "no_skill_file"
        assert "memory_save" in payload["hint"]

    def test_full_text(self, store: SkillStore):
        store.save("Notes", "hello")
        result = store.load()
        assert isinstance(result, Ok)
        assert result.text == "### Notes\n\nhello\n"

    def test_single_section(self, store: SkillStore):
        store.save("Recent Work", "- Did X", level=2)
        result = store.load(section="recent work")
        assert result.to_payload() == {"section": "Recent Work", "content": "- Did X", "level": 2}

    def test_section_not_found_lists_titles(self, store: SkillStore):
        store.save("Skills", "- Python", level=2)
        store.save("Recent Work", "- Did X", level=2)
        result = store.load(section="Hobbies")
        assert isinstance(result, NotFound)
        assert result.to_payload() == {
            "error": "section_not_found",
            "section": "Hobbies",
            "available": ["Skills", "Recent Work"],
        }

    def test_empty_file_is_not_missing(self, store: SkillStore):
        path = store.path_for()
        path.parent.mkdir(parents=True)
        path.write_text("", encoding="utf-8")
        result = store.load(section="Anything")
        assert isinstance(result, NotFound)
        assert result.available == []


class TestListSections:
    def test_no_document(self, store: SkillStore):
        assert isinstance(store.list_sections(), NoDocument)

    def test_outline(self, store: SkillStore):
        path = store.path_for()
        path.parent.mkdir(parents=True)
        path.write_text(
            "# Agent Skills\n\n## Skills\n- Python\n\n## Recent Work\n- Did X", encoding="utf-8"
        )
        result = store.list_sections()
        assert result.payload["sections"] == [
            {"title": "Agent Skills", "level": 1, "lines": 1},
            {"title": "Skills", "level": 2, "lines": 2},
            {"title": "Recent Work", "level": 2, "lines": 1},
        ]


class TestLifecycle:
    def test_init_fresh(self, store: SkillStore):
        result = store.init("scout")
        assert isinstance(result, Ok)
        assert not result.is_error
        assert result.payload["initialized"] is True
        assert result.payload["memory"] is None
        assert result.payload["path"].endswith("scout.skill.md")

    def test_init_loads_memory(self, store: SkillStore):
        store.save("Skills", "- Python", level=2, agent_name="scout")
        store.save("Recent Work", "- Did X", level=2, agent_name="scout")
        result = store.init("scout")
        assert result.text.startswith("=== MEMORY LOADED (2 sections) ===\n\n## Skills")
        assert result.text.endswith("\n\n=== END MEMORY ===")

    def test_destroy_without_notes(self, store: SkillStore):
        result = store.destroy("scout")
        assert result.payload == {"destroyed": True, "notes": "no final notes to save"}
        assert store.read("scout") is None

    def test_destroy_saves_notes(self, store: SkillStore):
        store.save("Skills", "- Python", level=2, agent_name="scout")
        result = store.destroy("scout", "wrapped up the refactor")
        assert result.payload["saved"] is True
        loaded = store.load("scout", section="Session Notes (2026-10-18 09:30:00)")
        assert loaded.payload["content"] == "wrapped up the refactor"
        assert loaded.payload["level"] == 3

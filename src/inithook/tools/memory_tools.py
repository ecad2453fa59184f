"""MCP tools for agent memory access.

These functions are exposed as tools to the agent, letting it restore its
memory on boot, save sections while it works and flush notes on shutdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from inithook.memory.results import Result
    from inithook.memory.store import SkillStore


class ToolArgumentError(ValueError):
    """A tool was called with missing or wrongly typed arguments."""


_AGENT_NAME = {
    "type": "string",
    "description": "Agent name for agent-specific skill file. Omit for default.",
}

TOOLS = [
    {
        "name": "memory_load",
        "description": (
            "Load agent memory from skill file. Returns full file or a specific section. "
            "Call this on boot to restore context."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "agent_name": _AGENT_NAME,
                "section": {
                    "type": "string",
                    "description": "Section title to load. Omit for full file.",
                },
            },
        },
    },
    {
        "name": "memory_save",
        "description": (
            "Save a section to the agent skill file. Upserts by section title: "
            "creates or replaces."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "agent_name": _AGENT_NAME,
                "section": {"type": "string", "description": "Section title (markdown header text)"},
                "content": {
                    "type": "string",
                    "description": "Section content (markdown body, without the header)",
                },
                "level": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 6,
                    "default": 3,
                    "description": "Header level (1-6). Default 3 (###).",
                },
            },
            "required": ["section", "content"],
        },
    },
    {
        "name": "memory_sections",
        "description": (
            "List all sections in the skill file. Useful for discovering what memories exist."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {"agent_name": _AGENT_NAME},
        },
    },
    {
        "name": "memory_init",
        "description": (
            "CONSTRUCTOR. Call this FIRST on boot. Loads your full skill file and returns it "
            "as boot context. This is your memory."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {"agent_name": _AGENT_NAME},
        },
    },
    {
        "name": "memory_destroy",
        "description": (
            "DESTRUCTOR. Call before shutdown. Saves final state to skill file. "
            "Pass any last-minute memories to persist."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "agent_name": _AGENT_NAME,
                "final_notes": {
                    "type": "string",
                    "description": "Any final notes/state to append to the skill file before shutdown.",
                },
            },
        },
    },
]


def _optional_str(args: dict[str, Any], key: str) -> str | None:
    value = args.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ToolArgumentError(f"'{key}' must be a string")


def _required_str(args: dict[str, Any], key: str) -> str:
    value = _optional_str(args, key)
    if value is None:
        raise ToolArgumentError(f"missing required argument '{key}'")
    return value


def get_memory_tools(store: SkillStore) -> dict[str, Callable[[dict[str, Any]], Result]]:
    """Return a dict of tool_name -> callable taking the raw tool arguments."""

    def memory_load(args: dict[str, Any]) -> Result:
        return store.load(
            agent_name=_optional_str(args, "agent_name"),
            section=_optional_str(args, "section"),
        )

    def memory_save(args: dict[str, Any]) -> Result:
        section = _required_str(args, "section")
        # A title must fit on a single header line to be found again.
        if not section.strip() or "\n" in section or "\r" in section:
            raise ToolArgumentError("'section' must be a non-empty single-line title")

        # Level range is checked by the store so it can report InvalidLevel.
        level = args.get("level")
        if isinstance(level, float) and level.is_integer():
            level = int(level)
        return store.save(
            section=section,
            content=_required_str(args, "content"),
            level=level,
            agent_name=_optional_str(args, "agent_name"),
        )

    def memory_sections(args: dict[str, Any]) -> Result:
        return store.list_sections(agent_name=_optional_str(args, "agent_name"))

    def memory_init(args: dict[str, Any]) -> Result:
        return store.init(agent_name=_optional_str(args, "agent_name"))

    def memory_destroy(args: dict[str, Any]) -> Result:
        return store.destroy(
            agent_name=_optional_str(args, "agent_name"),
            final_notes=_optional_str(args, "final_notes"),
        )

    return {
        "memory_load": memory_load,
        "memory_save": memory_save,
        "memory_sections": memory_sections,
        "memory_init": memory_init,
        "memory_destroy": memory_destroy,
    }

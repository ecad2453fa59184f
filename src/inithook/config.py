"""Configuration loading from environment variables and inithook.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

from inithook.memory.sections import valid_level

_DEFAULT_SKILL_DIR = Path.home() / ".claude"
_DEFAULT_SKILL_FILE = "agentchat.skill.md"
_CONFIG_FILENAME = "inithook.toml"


@dataclass
class HookConfig:
    """Top-level init-hook configuration."""

    skill_dir: Path = _DEFAULT_SKILL_DIR
    skill_file: str = _DEFAULT_SKILL_FILE
    default_level: int = 3
    log_level: str = "INFO"


def load_config(config_path: Path | None = None) -> HookConfig:
    """Load configuration from environment variables and optional inithook.toml.

    Priority: environment variables > inithook.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.claude/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, _DEFAULT_SKILL_DIR / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    memory_data = file_data.get("memory", {})

    default_level = memory_data.get("default_level", 3)
    if not valid_level(default_level):
        raise ValueError(f"memory.default_level must be an integer 1-6, got {default_level!r}")

    return HookConfig(
        skill_dir=Path(
            os.getenv("SKILL_DIR") or memory_data.get("skill_dir", str(_DEFAULT_SKILL_DIR))
        ).expanduser(),
        skill_file=os.getenv("SKILL_FILE") or memory_data.get("skill_file", _DEFAULT_SKILL_FILE),
        default_level=default_level,
        log_level=os.getenv("INITHOOK_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )

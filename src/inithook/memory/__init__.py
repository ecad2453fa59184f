"""Agent memory stored as markdown skill files.

Layout:
    ~/.claude/
    ├── agentchat.skill.md             # Default skill file (no agent name)
    └── <agent>.skill.md               # Per-agent skill file

Sections are delimited by markdown headers (``#`` to ``######``).
"""

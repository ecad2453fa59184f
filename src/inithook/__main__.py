"""Entry point: python -m inithook [serve|sections]

- No args / "serve":      MCP server over stdio (production)
- "sections [agent]":     Print the section outline of a skill file
"""

from __future__ import annotations

import asyncio
import logging
import sys

from inithook.config import load_config


def _setup_logging(level: str) -> None:
    # stdout is the MCP channel, so logs must stay on stderr.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _run_serve() -> None:
    """MCP server mode."""
    config = load_config()
    _setup_logging(config.log_level)

    from inithook.server import serve

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        pass
    except Exception:
        logging.getLogger("inithook").exception("Fatal error")
        sys.exit(1)


def _run_sections(agent_name: str | None) -> None:
    """Print title, level and line count of each section."""
    config = load_config()
    _setup_logging(config.log_level)

    from inithook.memory.store import SkillStore

    store = SkillStore(config)
    result = store.list_sections(agent_name)
    if result.is_error:
        print(result.to_payload()["hint"], file=sys.stderr)
        sys.exit(1)

    payload = result.to_payload()
    print(payload["path"])
    for s in payload["sections"]:
        indent = "  " * (s["level"] - 1)
        print(f"{indent}{'#' * s['level']} {s['title']} ({s['lines']} lines)")


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "serve"

    if cmd == "serve":
        _run_serve()
    elif cmd == "sections":
        _run_sections(sys.argv[2] if len(sys.argv) > 2 else None)
    else:
        print("Usage: python -m inithook [serve|sections [agent]]")
        print("  serve     MCP server over stdio (default)")
        print("  sections  Print the section outline of a skill file")
        sys.exit(1)


if __name__ == "__main__":
    main()

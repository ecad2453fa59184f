"""MCP server: init-hook-mcp, agent memory lifecycle tools.

Exposes the skill file as the agent's memory through five tools:
memory_init (constructor), memory_load, memory_save, memory_sections and
memory_destroy (destructor).

Protocol: JSON-RPC 2.0 over stdio (NDJSON). stdout carries protocol only;
logging goes to stderr.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Callable

from inithook.config import HookConfig
from inithook.memory.results import Result
from inithook.memory.store import SkillStore
from inithook.tools.memory_tools import TOOLS, ToolArgumentError, get_memory_tools

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────

SERVER_NAME = "init-hook-mcp"
SERVER_VERSION = "0.1.0"
PROTOCOL_VERSION = "2024-11-05"

INVALID_PARAMS = -32602
METHOD_NOT_FOUND = -32601

ToolTable = dict[str, Callable[[dict[str, Any]], Result]]

# ── JSON-RPC 2.0 helpers ─────────────────────────────────────


def jsonrpc_result(req_id, result):
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def jsonrpc_error(req_id, code, message):
    return {"jsonrpc": "2.0", "id": req_id, "error": {"code": code, "message": message}}


def text_content(text: str, *, is_error: bool = False) -> dict:
    content: dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        content["isError"] = True
    return content


def render_result(result: Result) -> dict:
    """Map a tagged store result onto an MCP tool result."""
    if not result.is_error and result.text is not None:
        return text_content(result.text)
    return text_content(
        json.dumps(result.to_payload(), ensure_ascii=False), is_error=result.is_error
    )


# ── Request handler ──────────────────────────────────────────


async def handle_request(req: dict, tools: ToolTable) -> dict | None:
    req_id = req.get("id")
    method = req.get("method", "")

    # Notifications (no id) get no response
    if req_id is None:
        if method == "notifications/initialized":
            logger.info("Client initialized")
        return None

    if method == "initialize":
        return jsonrpc_result(req_id, {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
        })

    if method == "ping":
        return jsonrpc_result(req_id, {})

    if method == "tools/list":
        return jsonrpc_result(req_id, {"tools": TOOLS})

    if method == "tools/call":
        params = req.get("params") or {}
        if not isinstance(params, dict):
            return jsonrpc_error(req_id, INVALID_PARAMS, "params must be an object")
        tool_name = params.get("name", "")
        args = params.get("arguments") or {}
        if not isinstance(args, dict):
            return jsonrpc_error(req_id, INVALID_PARAMS, "arguments must be an object")

        tool = tools.get(tool_name)
        if tool is None:
            return jsonrpc_result(req_id, text_content(f"Unknown tool: {tool_name}", is_error=True))

        try:
            result = tool(args)
        except ToolArgumentError as e:
            return jsonrpc_error(req_id, INVALID_PARAMS, f"{tool_name}: {e}")
        except Exception as e:
            logger.exception("Tool %s failed", tool_name)
            return jsonrpc_result(req_id, text_content(f"[internal error] {e}", is_error=True))
        return jsonrpc_result(req_id, render_result(result))

    return jsonrpc_error(req_id, METHOD_NOT_FOUND, f"Method not found: {method}")


# ── Stdio transport (NDJSON) ─────────────────────────────────


def _write(response: dict) -> None:
    sys.stdout.write(json.dumps(response, ensure_ascii=False) + "\n")
    sys.stdout.flush()


async def process_line(raw: bytes, tools: ToolTable) -> dict | None:
    """Decode one NDJSON line and dispatch it. Bad lines are logged and dropped."""
    try:
        line = raw.decode("utf-8").strip()
    except UnicodeDecodeError as e:
        logger.warning("Undecodable line: %s", e)
        return None
    if not line:
        return None

    try:
        req = json.loads(line)
    except json.JSONDecodeError as e:
        logger.warning("Parse error: %s", e)
        return None
    if not isinstance(req, dict):
        logger.warning("Ignoring non-object request: %r", req)
        return None

    logger.debug("<- %s", req.get("method", "?"))
    try:
        return await handle_request(req, tools)
    except Exception:
        logger.exception("Handler error")
        return None


async def serve(config: HookConfig) -> None:
    """Serve requests from stdin until EOF."""
    tools = get_memory_tools(SkillStore(config))
    logger.info("%s: server started (skill_dir=%s)", SERVER_NAME, config.skill_dir)

    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await asyncio.get_running_loop().connect_read_pipe(lambda: protocol, sys.stdin)

    while True:
        line = await reader.readline()
        if not line:
            break
        response = await process_line(line, tools)
        if response:
            _write(response)

    logger.info("%s: stdin closed, shutting down", SERVER_NAME)

"""MCP server for inspecting and sending Redis command frames.

Exposes tools and a resource via the Model Context Protocol using the
official Python MCP SDK with stdio transport.

The encoding tools work standalone. ``query`` and ``pipeline`` need a
client: embed the server and call :func:`attach_client` (or pass the
client to :func:`main`) before running it.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from . import client as client_mod
from .client import DEFAULT_TIMEOUT, Client, q, qp
from .config import resolve_config
from .errors import RequestTimeout, UnsupportedValue
from .protocol.framing import create_multibulk, parse_multibulk
from .protocol.messages import Error, Ok

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "redisq",
    instructions="Encode Redis commands as RESP frames and dispatch them",
)

# Global client state
_client: Client | None = None


def attach_client(client: Client | None) -> None:
    """Set the client used by the ``query`` and ``pipeline`` tools."""
    global _client
    _client = client


def _get_client() -> Client:
    """Get the attached client, raising if there is none."""
    if _client is None:
        raise RuntimeError(
            "No client attached. Start one and pass it to attach_client() first."
        )
    return _client


def _describe_frame(frame: bytes) -> dict[str, Any]:
    return {
        "frame": frame.decode("latin-1"),
        "frame_hex": frame.hex(" "),
        "length": len(frame),
        "argc": len(parse_multibulk(frame) or []),
    }


def _check_commands(commands: list[list[str | int]]) -> str | None:
    """Return an error message if any command has no verb."""
    for i, command in enumerate(commands):
        if not command:
            return f"Command {i} must not be empty"
    return None


def _result_to_dict(result: Ok | Error) -> dict[str, Any]:
    value = result.value if isinstance(result, Ok) else result.reason
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    key = "value" if isinstance(result, Ok) else "error"
    return {"ok": result.ok, key: value}


# ─── ENCODING TOOLS ──────────────────────────────────────────────────

@mcp.tool()
def encode_command(command: list[str | int]) -> dict[str, Any]:
    """Encode one command as a RESP multibulk request frame.

    Args:
        command: Redis verb followed by its arguments, e.g. ["SET", "foo", "bar"].
    """
    if not command:
        return {"error": "Command must not be empty"}
    try:
        frame = create_multibulk(command)
    except UnsupportedValue as e:
        return {"error": str(e)}
    return _describe_frame(frame)


@mcp.tool()
def encode_pipeline(commands: list[list[str | int]]) -> dict[str, Any]:
    """Encode a pipeline, returning one frame description per command.

    Args:
        commands: Ordered list of commands.
    """
    error = _check_commands(commands)
    if error:
        return {"error": error}
    try:
        frames = client_mod.encode_pipeline(commands)
    except UnsupportedValue as e:
        return {"error": str(e)}
    return {"frames": [_describe_frame(f) for f in frames]}


@mcp.tool()
def connection_defaults() -> dict[str, Any]:
    """Show the connection settings a default client would use.

    Reads REDISTOGO_URL; the password is masked.
    """
    return resolve_config().to_dict()


# ─── DISPATCH TOOLS ──────────────────────────────────────────────────

@mcp.tool()
def query(command: list[str | int], timeout_ms: int = DEFAULT_TIMEOUT) -> dict[str, Any]:
    """Run one command on the attached client.

    Args:
        command: Redis verb followed by its arguments.
        timeout_ms: Reply deadline in milliseconds (default 5000).
    """
    if not command:
        return {"error": "Command must not be empty"}
    if timeout_ms <= 0:
        return {"error": "timeout_ms must be positive"}

    client = _get_client()
    try:
        result = q(client, command, timeout_ms)
    except UnsupportedValue as e:
        return {"error": str(e)}
    except RequestTimeout:
        return {"error": "timeout", "timeout_ms": timeout_ms}
    return _result_to_dict(result)


@mcp.tool()
def pipeline(commands: list[list[str | int]], timeout_ms: int = DEFAULT_TIMEOUT) -> dict[str, Any]:
    """Run several commands on the attached client in one round trip.

    Args:
        commands: Ordered list of commands; results come back in the same order.
        timeout_ms: Reply deadline in milliseconds (default 5000).
    """
    error = _check_commands(commands)
    if error:
        return {"error": error}
    if timeout_ms <= 0:
        return {"error": "timeout_ms must be positive"}

    client = _get_client()
    try:
        reply = qp(client, commands, timeout_ms)
    except UnsupportedValue as e:
        return {"error": str(e)}
    except RequestTimeout:
        return {"error": "timeout", "timeout_ms": timeout_ms}

    if isinstance(reply, Error):
        return _result_to_dict(reply)
    return {"results": [_result_to_dict(r) for r in reply]}


# ─── RESOURCES ───────────────────────────────────────────────────────

@mcp.resource("redisq://wire-format")
def wire_format() -> str:
    """Description of the request frame layout."""
    return (
        "*<argc>\\r\\n followed by one $<byte length>\\r\\n<bytes>\\r\\n "
        "segment per argument. Strings are UTF-8, integers decimal, "
        "floats are rejected."
    )


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main(client: Client | None = None):
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    if client is not None:
        attach_client(client)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

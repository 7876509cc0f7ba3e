"""gatherbrained - main entry point for the shell and the MCP server."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

# MCP imports are optional - only needed when running the server
try:
    from mcp.server import Server  # pragma: no cover
    from mcp.server.stdio import stdio_server  # pragma: no cover
    from mcp.types import Tool, TextContent  # pragma: no cover
    HAS_MCP = True  # pragma: no cover
except ImportError:
    HAS_MCP = False
    Server = None  # type: ignore
    Tool = None  # type: ignore
    TextContent = None  # type: ignore

from .config import load_config
from .engine import Gatherbrained, GatherError
from .shell import GatherShell
from .tools import execute_tool, make_tools

logger = logging.getLogger(__name__)


def create_server(store: Gatherbrained) -> "Server":
    """Create and configure the MCP server.

    Args:
        store: The gatherbrained to serve

    Returns:
        Configured MCP Server instance

    Raises:
        ImportError: If MCP package is not installed
    """
    if not HAS_MCP:
        raise ImportError(
            "MCP package not installed. Install with: pip install gatherbrained[mcp]"
        )

    server = Server("gatherbrained")
    tool_defs = make_tools(store)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """Return list of available tools."""
        return [
            Tool(
                name=t["name"],
                description=t["description"],
                inputSchema=t["inputSchema"],
            )
            for t in tool_defs.values()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool invocation."""
        result = await execute_tool(store, name, arguments or {})
        return [TextContent(type="text", text=json.dumps(result, indent=2, default=str))]

    return server


async def run_server(store: Gatherbrained) -> None:
    """Run the MCP server with stdio transport."""
    if not HAS_MCP:
        raise ImportError(
            "MCP package not installed. Install with: pip install gatherbrained[mcp]"
        )

    server = create_server(store)  # pragma: no cover

    async with stdio_server() as (read_stream, write_stream):  # pragma: no cover
        await server.run(  # pragma: no cover
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gatherbrained",
        description="gatherbrained - gather ideas in a flat file and narrate stories from them",
        epilog="Without a command an interactive shell is started; type 'help' there.",
    )
    parser.add_argument(
        "path",
        type=Path,
        help="The gatherbrained file",
    )
    parser.add_argument(
        "command",
        nargs="*",
        help="Run a single shell command (add, edit, search, narrate, missing) and exit",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Path to settings file (default: auto-detect next to the file, then in cwd)",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve read-only search/narrate/missing tools over MCP stdio",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output to stderr",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # Load configuration
    try:
        config = load_config(args.path, args.config)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        store = Gatherbrained(args.path)
    except GatherError as e:
        print(f"Error opening gatherbrained: {e}", file=sys.stderr)
        sys.exit(1)

    if args.serve:
        # Check for MCP before starting server mode
        if not HAS_MCP:
            print("Error: MCP package not installed.", file=sys.stderr)
            print("Install with: pip install gatherbrained[mcp]", file=sys.stderr)
            sys.exit(1)
        logger.debug("Serving %s over MCP stdio", store.path)
        asyncio.run(run_server(store))
        return

    shell = GatherShell(store, config)

    if args.command:
        # One-shot mode: errors turn into a failing exit status
        name, rest = args.command[0], args.command[1:]
        if name not in shell.commands:
            print(f"unknown command: {name}", file=sys.stderr)
            sys.exit(1)
        try:
            shell.run_command(name, rest)
        except GatherError as e:
            print(f"error: {e}", file=sys.stderr)
            sys.exit(1)
        return

    shell.run()


if __name__ == "__main__":  # pragma: no cover
    main()

"""MCP tool definitions wrapping the gatherbrained store.

Only read-only operations are exposed; add and edit need an interactive
editor and stay in the shell.
"""

from __future__ import annotations

from typing import Any

from .engine import Gatherbrained, GatherError, GatherIOError


class InvalidArgumentsError(ValueError):
    """A tool argument has the wrong type."""


def _string_list(arguments: dict[str, Any], key: str, default: Any = None) -> list[str]:
    """Fetch a list-of-strings argument, rejecting bare strings and other types."""
    value = arguments[key] if default is None else arguments.get(key, default)
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise InvalidArgumentsError(f"Argument {key} must be a list of strings")
    return list(value)


def make_tools(store: Gatherbrained) -> dict[str, dict]:
    """Create MCP tool definitions for the gatherbrained store.

    Returns:
        Dict mapping tool names to their definitions.
    """

    tools = {}

    # ========== gather_search ==========
    tools["gather_search"] = {
        "name": "gather_search",
        "description": "Search the gatherbrained for entries containing every needle (case-insensitive substring match). Returns the matches in gatherbrained format.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "needles": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Keywords that must all appear in an entry, e.g. ['#taoism', 'beauty']. Empty matches everything.",
                },
            },
            "required": ["needles"],
        },
    }

    # ========== gather_narrate ==========
    tools["gather_narrate"] = {
        "name": "gather_narrate",
        "description": "Narrate a story: every non-blank line of each narrative file is a search, and the results are joined in order.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "narratives": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Paths of narrative files, read in order",
                },
            },
            "required": ["narratives"],
        },
    }

    # ========== gather_missing ==========
    tools["gather_missing"] = {
        "name": "gather_missing",
        "description": "List the entries not matched by any line of the narrative files.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "narratives": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Paths of narrative files",
                },
            },
            "required": ["narratives"],
        },
    }

    # ========== gather_stats ==========
    tools["gather_stats"] = {
        "name": "gather_stats",
        "description": "Report the gatherbrained file path and its number of entries.",
        "inputSchema": {
            "type": "object",
            "properties": {},
        },
    }

    return tools


async def execute_tool(store: Gatherbrained, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Execute a tool and return the result."""
    try:
        if name == "gather_search":
            needles = _string_list(arguments, "needles", default=[])
            matched = store.select(needles)
            return {
                "success": True,
                "needles": needles,
                "count": len(matched),
                "content": store.search(needles),
            }

        elif name == "gather_narrate":
            narratives = _string_list(arguments, "narratives")
            return {
                "success": True,
                "narratives": narratives,
                "content": store.narrate(narratives),
            }

        elif name == "gather_missing":
            narratives = _string_list(arguments, "narratives")
            return {
                "success": True,
                "narratives": narratives,
                "content": store.missing(narratives),
            }

        elif name == "gather_stats":
            return {
                "success": True,
                "path": str(store.path),
                "entries": len(store),
            }

        else:
            return {
                "success": False,
                "error": f"Unknown tool: {name}",
            }

    except GatherIOError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "io_error",
            "suggestion": "Check that the file exists and is readable",
        }

    except GatherError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "gather_error",
        }

    except KeyError as e:
        return {
            "success": False,
            "error": f"Missing required argument: {e.args[0]}",
            "error_type": "invalid_arguments",
        }

    except InvalidArgumentsError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "invalid_arguments",
        }

    except Exception as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "unexpected_error",
        }

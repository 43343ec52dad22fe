"""
Tool registry for the dbalog MCP server.

This module provides the central registration system for all MCP tools,
organized into logical categories.
"""
import logging
from fastmcp import FastMCP

from .message_tools import register_message_tools
from .level_tools import register_level_tools
from .support_tools import register_support_tools

logger = logging.getLogger(__name__)

def register_all_tools(mcp: FastMCP) -> None:
    """
    Register all MCP tools with the FastMCP server.

    This function orchestrates the registration of all tool categories:
    - Message tools (write_message, get_log, get_error_log, clear_log)
    - Level tools (resolve_message_level, level modifiers, nesting decrement)
    - Support tools (get_help)

    Args:
        mcp: The FastMCP server instance
    """
    logger.info("Starting tool registration for dbalog MCP server")

    try:
        logger.debug("Registering message tools...")
        register_message_tools(mcp)

        logger.debug("Registering level tools...")
        register_level_tools(mcp)

        logger.debug("Registering support tools...")
        register_support_tools(mcp)

        logger.info("Successfully registered all MCP tools")

    except Exception as e:
        logger.error(f"Failed to register tools: {e}")
        raise

# Tool categories for reference
TOOL_CATEGORIES = {
    "messages": {
        "tools": ["write_message", "get_log", "get_error_log", "clear_log"],
        "description": "Tools for writing messages and reading the in-memory message and error logs"
    },
    "levels": {
        "tools": [
            "resolve_message_level", "get_level_modifier", "set_level_modifier",
            "remove_level_modifier", "save_level_modifiers", "load_level_modifiers",
            "set_nesting_decrement", "get_message_config"
        ],
        "description": "Tools for message level resolution, level modifiers and the nesting decrement"
    },
    "support": {
        "tools": ["get_help"],
        "description": "Tools for getting help"
    }
}

def get_tool_info() -> dict:
    """
    Get information about all available tools.

    Returns:
        Dictionary containing tool categories and descriptions
    """
    return {
        "categories": TOOL_CATEGORIES,
        "total_tools": sum(len(cat["tools"]) for cat in TOOL_CATEGORIES.values())
    }

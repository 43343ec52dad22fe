"""
Support tools for the dbalog MCP server.

This module contains the help tool.
"""
import logging
from typing import Any, Dict

from fastmcp import FastMCP, Context

from ..core.errors import ErrorCategory, ToolError
from ..core.levels import MessageLevel

logger = logging.getLogger(__name__)

TOOL_EXAMPLES = {
    "write_message": [
        "write_message(level='Verbose', message='Copying proxy', function_name='copy_proxy', module_name='dbatools')"
    ],
    "get_log": [
        "get_log(function_name='copy_*', last=1)",
        "get_log(tags=['registry'], max_level=3)"
    ],
    "get_error_log": ["get_error_log(module_name='dbatools')"],
    "clear_log": ["clear_log()"],
    "resolve_message_level": [
        "resolve_message_level(level=5, function_name='get_publication', module_name='dbatools', depth=2)"
    ],
    "get_level_modifier": ["get_level_modifier(name='quiet_*')"],
    "set_level_modifier": [
        "set_level_modifier(name='quiet_registry', modifier=3, include_tags=['registry'])",
        "set_level_modifier(name='loud_copy', modifier=-2, include_function_name='copy_*')"
    ],
    "remove_level_modifier": ["remove_level_modifier(name='quiet_registry')"],
    "save_level_modifiers": ["save_level_modifiers(path='modifiers.json')"],
    "load_level_modifiers": ["load_level_modifiers(path='modifiers.json')"],
    "set_nesting_decrement": ["set_nesting_decrement(value=1)"],
    "get_message_config": ["get_message_config()"],
    "get_help": ["get_help()", "get_help(tool_name='get_log')"],
}

def register_support_tools(mcp: FastMCP):
    """Register all support tools."""

    @mcp.tool()
    async def get_help(ctx: Context, tool_name: str = "") -> Dict[str, Any]:
        """
        Get help and examples for the dbalog tools.

        Args:
            ctx: The MCP context
            tool_name: Name of the tool to get help for (empty for all tools)

        Returns:
            Help information and examples
        """
        # Imported here: the registry imports this module
        from . import TOOL_CATEGORIES

        logger.debug(f"Getting help for tool: {tool_name}")

        if not tool_name:
            return {
                "description": "dbalog MCP server - message levels and logs for administration commands",
                "tool_categories": {
                    category: details["tools"] for category, details in TOOL_CATEGORIES.items()
                },
                "levels": {level.name: int(level) for level in MessageLevel},
                "usage": "Use get_help(tool_name='tool_name') to get help for a specific tool"
            }

        if tool_name not in TOOL_EXAMPLES:
            return ToolError(
                category=ErrorCategory.NOT_FOUND,
                message=f"Unknown tool: {tool_name}",
                suggestions=[f"Available tools: {', '.join(sorted(TOOL_EXAMPLES))}"],
                related_tools=["get_help"]
            ).to_dict()

        category = next(
            (name for name, details in TOOL_CATEGORIES.items() if tool_name in details["tools"]),
            None
        )
        return {
            "tool": tool_name,
            "category": category,
            "examples": TOOL_EXAMPLES[tool_name]
        }

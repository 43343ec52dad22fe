"""
Level configuration tools for the dbalog MCP server.

This module contains the operator-facing tools for resolving message levels,
managing level modifiers and setting the nesting decrement.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from fastmcp import FastMCP, Context

from .. import config
from ..core.errors import enhance_error
from ..core.level_modifiers import LevelModifier
from ..core.level_resolver import get_level_resolver, resolve_level
from ..core.levels import parse_level
from ..core.log_store import get_message_log

logger = logging.getLogger(__name__)

def register_level_tools(mcp: FastMCP):
    """Register all level configuration tools."""

    @mcp.tool()
    async def resolve_message_level(
        ctx: Context,
        level: Union[int, str],
        function_name: str,
        module_name: str,
        tags: Optional[List[str]] = None,
        from_guarded_call: bool = False,
        depth: int = 0
    ) -> Dict[str, Any]:
        """
        Compute the effective level a message would be written at.

        Args:
            ctx: The MCP context
            level: Nominal level 1-9 or a level name
            function_name: Originating function
            module_name: Originating module
            tags: Message tags
            from_guarded_call: True if the message goes through stop_function
            depth: Nesting depth (0 for a top-level command)

        Returns:
            Original and resolved level with the settings used
        """
        logger.debug(f"Resolving level {level} for {module_name}/{function_name} at depth {depth}")

        try:
            original = parse_level(level)
            settings = get_level_resolver().snapshot()
            resolved = resolve_level(
                original, from_guarded_call, tags, function_name, module_name,
                settings=settings, depth=depth
            )
            matched = sorted(
                (m for m in settings.modifiers if m.applies_to(function_name, module_name, tags)),
                key=lambda m: m.name.lower()
            )
            return {
                "original_level": original.name,
                "level": resolved.name,
                "level_number": int(resolved),
                "nesting_decrement": settings.nesting_decrement,
                "depth": depth,
                "matched_modifiers": [m.name for m in matched]
            }
        except Exception as e:
            return enhance_error(e, "resolve_message_level").to_dict()

    @mcp.tool()
    async def get_level_modifier(ctx: Context, name: str = "*") -> Dict[str, Any]:
        """
        List level modifiers.

        Args:
            ctx: The MCP context
            name: Wildcard on the modifier name

        Returns:
            Matching modifiers sorted by name
        """
        modifiers = get_level_resolver().registry.get(name)
        return {
            "count": len(modifiers),
            "modifiers": [m.to_dict() for m in modifiers]
        }

    @mcp.tool()
    async def set_level_modifier(
        ctx: Context,
        name: str,
        modifier: int,
        include_function_name: Optional[str] = None,
        exclude_function_name: Optional[str] = None,
        include_module_name: Optional[str] = None,
        exclude_module_name: Optional[str] = None,
        include_tags: Optional[List[str]] = None,
        exclude_tags: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """
        Create or replace a level modifier.

        Args:
            ctx: The MCP context
            name: Modifier name (replaces an existing modifier of that name)
            modifier: Amount added to the level of matching messages
            include_function_name: Only functions matching this wildcard
            exclude_function_name: Never functions matching this wildcard
            include_module_name: Only modules matching this wildcard
            exclude_module_name: Never modules matching this wildcard
            include_tags: Only messages carrying any of these tags
            exclude_tags: Never messages carrying any of these tags

        Returns:
            The registered modifier
        """
        logger.debug(f"Setting level modifier '{name}' ({modifier})")

        try:
            level_modifier = LevelModifier(
                name=name,
                modifier=modifier,
                include_function_name=include_function_name,
                exclude_function_name=exclude_function_name,
                include_module_name=include_module_name,
                exclude_module_name=exclude_module_name,
                include_tags=include_tags or (),
                exclude_tags=exclude_tags or ()
            )
            get_level_resolver().registry.register(level_modifier)
            return {"success": True, "modifier": level_modifier.to_dict()}
        except Exception as e:
            return enhance_error(e, "set_level_modifier").to_dict()

    @mcp.tool()
    async def remove_level_modifier(ctx: Context, name: str) -> Dict[str, Any]:
        """
        Remove a level modifier by name.

        Args:
            ctx: The MCP context
            name: Exact modifier name

        Returns:
            The removed modifier
        """
        try:
            registry = get_level_resolver().registry
            removed = registry.require(name)
            registry.remove(name)
            return {"success": True, "removed": removed.to_dict()}
        except Exception as e:
            return enhance_error(e, "remove_level_modifier").to_dict()

    @mcp.tool()
    async def save_level_modifiers(ctx: Context, path: str) -> Dict[str, Any]:
        """
        Write all level modifiers to a JSON file.

        Args:
            ctx: The MCP context
            path: Destination file

        Returns:
            Number of modifiers written
        """
        try:
            count = get_level_resolver().registry.save_file(path)
            return {"success": True, "path": path, "count": count}
        except Exception as e:
            return enhance_error(e, "save_level_modifiers").to_dict()

    @mcp.tool()
    async def load_level_modifiers(ctx: Context, path: str) -> Dict[str, Any]:
        """
        Register level modifiers from a JSON file.

        Args:
            ctx: The MCP context
            path: JSON file holding a list of modifier definitions

        Returns:
            Number of modifiers registered
        """
        try:
            count = get_level_resolver().registry.load_file(path)
            return {"success": True, "path": path, "count": count}
        except Exception as e:
            return enhance_error(e, "load_level_modifiers").to_dict()

    @mcp.tool()
    async def set_nesting_decrement(ctx: Context, value: int) -> Dict[str, Any]:
        """
        Set the per-depth level adjustment for nested messages.

        Args:
            ctx: The MCP context
            value: Amount added per nesting level (0 disables the adjustment)

        Returns:
            Previous and current values
        """
        try:
            previous = get_level_resolver().set_nesting_decrement(value)
            return {"success": True, "previous": previous, "nesting_decrement": value}
        except Exception as e:
            return enhance_error(e, "set_nesting_decrement").to_dict()

    @mcp.tool()
    async def get_message_config(ctx: Context) -> Dict[str, Any]:
        """
        Show the active message configuration.

        Args:
            ctx: The MCP context

        Returns:
            Nesting decrement, modifier count and log buffer statistics
        """
        resolver = get_level_resolver()
        return {
            "nesting_decrement": resolver.nesting_decrement,
            "modifier_count": len(resolver.registry),
            "maximum_info_level": config.MAXIMUM_INFO_LEVEL,
            "log": get_message_log().get_stats()
        }

"""
Message tools for the dbalog MCP server.

This module contains tools for writing messages and retrieving the in-memory
message and error logs.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from fastmcp import FastMCP, Context

from ..core.errors import enhance_error
from ..core.log_store import get_message_log
from ..core.messaging import get_message_writer

logger = logging.getLogger(__name__)

def register_message_tools(mcp: FastMCP):
    """Register all message and log retrieval tools."""

    @mcp.tool()
    async def write_message(
        ctx: Context,
        level: Union[int, str],
        message: str,
        function_name: str,
        module_name: str,
        tags: Optional[List[str]] = None,
        target: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Write a message to the message log.

        Args:
            ctx: The MCP context
            level: Level 1-9 or a level name such as "Verbose"
            message: Message text
            function_name: Function the message is attributed to
            module_name: Module the message is attributed to
            tags: Optional tags
            target: Optional target the message is about

        Returns:
            The recorded entry with its resolved level
        """
        logger.debug(f"Writing message for {module_name}/{function_name}")

        try:
            writer = get_message_writer(module_name)
            # Each call is its own top-level command execution
            with writer.tracker.scope(function_name):
                entry = writer.write_message(
                    level, message, function_name=function_name, tags=tags, target=target
                )
            return {"success": True, "entry": entry.to_dict()}
        except Exception as e:
            return enhance_error(e, "write_message").to_dict()

    @mcp.tool()
    async def get_log(
        ctx: Context,
        function_name: str = "*",
        module_name: str = "*",
        target: Optional[str] = None,
        tags: Optional[List[str]] = None,
        execution_id: Optional[str] = None,
        min_level: Optional[Union[int, str]] = None,
        max_level: Optional[Union[int, str]] = None,
        last: int = 0,
        skip: int = 0
    ) -> Dict[str, Any]:
        """
        Retrieve messages from the in-memory message log.

        Args:
            ctx: The MCP context
            function_name: Wildcard on the originating function
            module_name: Wildcard on the originating module
            target: Exact target to match
            tags: Return messages carrying any of these tags
            execution_id: Return messages from one command execution
            min_level: Lowest level to include
            max_level: Highest level to include
            last: Only the last N command executions (0 for all)
            skip: Skip the newest N executions before applying last

        Returns:
            Matching entries, oldest first
        """
        logger.debug(f"Getting log: function={function_name}, module={module_name}, last={last}, skip={skip}")

        try:
            if last < 0 or skip < 0:
                raise ValueError("last and skip must not be negative")

            entries = get_message_log().get_entries(
                function_name=function_name,
                module_name=module_name,
                target=target,
                tags=tags,
                execution_id=execution_id,
                min_level=min_level,
                max_level=max_level,
                last=last,
                skip=skip
            )
            return {
                "count": len(entries),
                "entries": [entry.to_dict() for entry in entries]
            }
        except Exception as e:
            return enhance_error(e, "get_log").to_dict()

    @mcp.tool()
    async def get_error_log(
        ctx: Context,
        function_name: str = "*",
        module_name: str = "*",
        execution_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Retrieve recorded errors.

        Args:
            ctx: The MCP context
            function_name: Wildcard on the originating function
            module_name: Wildcard on the originating module
            execution_id: Return errors from one command execution

        Returns:
            Matching error entries, oldest first
        """
        logger.debug(f"Getting error log: function={function_name}, module={module_name}")

        try:
            errors = get_message_log().get_errors(
                function_name=function_name,
                module_name=module_name,
                execution_id=execution_id
            )
            return {
                "count": len(errors),
                "errors": [error.to_dict() for error in errors]
            }
        except Exception as e:
            return enhance_error(e, "get_error_log").to_dict()

    @mcp.tool()
    async def clear_log(ctx: Context) -> Dict[str, Any]:
        """
        Empty the message and error logs.

        Args:
            ctx: The MCP context

        Returns:
            Counts of the entries that were discarded
        """
        message_log = get_message_log()
        stats = message_log.get_stats()
        message_log.clear()
        logger.info(f"Cleared {stats['message_count']} messages and {stats['error_count']} errors")
        return {
            "success": True,
            "messages_cleared": stats["message_count"],
            "errors_cleared": stats["error_count"]
        }

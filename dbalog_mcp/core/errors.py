"""
Error types and tool-facing error responses for the dbalog MCP server.

Library code raises the exceptions defined here; MCP tools catch them and
turn them into dictionaries with a category and suggestions for the client.
"""
import json
import logging
from enum import Enum
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class DbaLogError(Exception):
    """Base class for all dbalog errors."""


class LevelValidationError(DbaLogError, ValueError):
    """Raised when a required input is missing or a level is out of range."""


class ModifierNotFoundError(DbaLogError, KeyError):
    """Raised when a named level modifier does not exist."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class CommandStoppedError(DbaLogError):
    """Raised by stop_function when the caller asked for exceptions."""

    def __init__(self, message: str, function_name: str = "", target: str = None):
        super().__init__(message)
        self.function_name = function_name
        self.target = target


class ErrorCategory(Enum):
    """Categories of errors for tailored responses."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STOPPED = "stopped"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class ToolError:
    """Error with suggestions, returned by MCP tools instead of raising."""

    def __init__(
        self,
        category: ErrorCategory,
        message: str,
        suggestions: List[str] = None,
        related_tools: List[str] = None
    ):
        self.category = category
        self.message = message
        self.suggestions = suggestions or []
        self.related_tools = related_tools or []

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for MCP response."""
        result = {
            "error": self.message,
            "category": self.category.value
        }

        if self.suggestions:
            result["suggestions"] = self.suggestions

        if self.related_tools:
            result["related_tools"] = self.related_tools

        return result


def enhance_error(error: Exception, tool_name: str = "") -> ToolError:
    """Build a ToolError for an exception raised while serving a tool."""
    if isinstance(error, LevelValidationError):
        return ToolError(
            category=ErrorCategory.VALIDATION,
            message=str(error),
            suggestions=[
                "Levels are integers from 1 (critical) to 9 (internal comment) or their names",
                "function_name and module_name must be non-empty strings",
                "Tags must be a list of strings"
            ],
            related_tools=["get_help"]
        )

    if isinstance(error, ModifierNotFoundError):
        return ToolError(
            category=ErrorCategory.NOT_FOUND,
            message=str(error),
            suggestions=["List the registered modifiers with get_level_modifier(name='*')"],
            related_tools=["get_level_modifier", "set_level_modifier"]
        )

    if isinstance(error, CommandStoppedError):
        return ToolError(
            category=ErrorCategory.STOPPED,
            message=str(error),
            suggestions=["Inspect the error log with get_error_log for the full record"],
            related_tools=["get_error_log"]
        )

    if isinstance(error, (OSError, json.JSONDecodeError)):
        return ToolError(
            category=ErrorCategory.CONFIGURATION,
            message=str(error),
            suggestions=["Check the file path and JSON contents of the modifier file"]
        )

    if isinstance(error, ValueError):
        return ToolError(category=ErrorCategory.VALIDATION, message=str(error))

    logger.error(f"Unexpected error in {tool_name or 'tool'}: {error}")
    return ToolError(category=ErrorCategory.INTERNAL, message=str(error))

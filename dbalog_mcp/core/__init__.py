"""
Core functionality for the dbalog MCP server.

This package provides message levels, level modifier rules, nesting depth
tracking, level resolution, the in-memory message and error logs, and the
message front end used by administration commands.
"""

from .errors import (
    DbaLogError,
    LevelValidationError,
    ModifierNotFoundError,
    CommandStoppedError,
    ErrorCategory,
    ToolError,
    enhance_error
)

from .levels import (
    MessageLevel,
    clamp_level,
    parse_level,
    to_logging_level
)

from .level_modifiers import (
    LevelModifier,
    ModifierRegistry,
    get_modifier_registry
)

from .nesting import (
    NestingTracker,
    ScopeFrame,
    get_nesting_tracker,
    command
)

from .level_resolver import (
    ResolverSettings,
    LevelResolver,
    resolve_level,
    get_level_resolver
)

from .log_store import (
    LogEntry,
    ErrorEntry,
    MessageLog,
    get_message_log
)

from .messaging import (
    MessageWriter,
    get_message_writer
)

__all__ = [
    # Errors
    'DbaLogError',
    'LevelValidationError',
    'ModifierNotFoundError',
    'CommandStoppedError',
    'ErrorCategory',
    'ToolError',
    'enhance_error',

    # Levels
    'MessageLevel',
    'clamp_level',
    'parse_level',
    'to_logging_level',

    # Modifiers
    'LevelModifier',
    'ModifierRegistry',
    'get_modifier_registry',

    # Nesting
    'NestingTracker',
    'ScopeFrame',
    'get_nesting_tracker',
    'command',

    # Resolution
    'ResolverSettings',
    'LevelResolver',
    'resolve_level',
    'get_level_resolver',

    # Message log
    'LogEntry',
    'ErrorEntry',
    'MessageLog',
    'get_message_log',

    # Front end
    'MessageWriter',
    'get_message_writer',
]

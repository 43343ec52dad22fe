"""
Centralized configuration for the dbalog MCP server.

This module contains the message level constants, buffer sizes and logging
settings used throughout the application, plus the environment loader that
turns operator-provided variables into a MessageConfig.
"""
import logging
import os
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# ====================================================================
# MESSAGE LEVEL SETTINGS
# ====================================================================

# Closed range of valid message levels (1 = most severe)
MIN_MESSAGE_LEVEL = 1
MAX_MESSAGE_LEVEL = 9

# Levels up to this value are forwarded to logging at INFO, the rest at DEBUG
MAXIMUM_INFO_LEVEL = 3

# Per-depth adjustment applied to nested messages (0 disables it)
DEFAULT_NESTING_DECREMENT = 0

# ====================================================================
# MESSAGE BUFFER SETTINGS
# ====================================================================

MAX_MESSAGE_COUNT = 1024
MAX_ERROR_COUNT = 128

# JSON file holding level modifier rules to load at startup
MODIFIER_FILE: Optional[str] = None

# ====================================================================
# LOGGING CONFIGURATION
# ====================================================================

LOG_LEVEL = "INFO"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Debug mode settings
DEBUG_ENABLED = False
VERBOSE_LOGGING = False

# ====================================================================
# MESSAGE CONFIGURATION
# ====================================================================

@dataclass
class MessageConfig:
    """Runtime settings for message resolution and retention."""
    nesting_decrement: int = DEFAULT_NESTING_DECREMENT
    max_message_count: int = MAX_MESSAGE_COUNT
    max_error_count: int = MAX_ERROR_COUNT
    maximum_info_level: int = MAXIMUM_INFO_LEVEL
    modifier_file: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

# ====================================================================
# ENVIRONMENT DETECTION
# ====================================================================

def _int_from_env(name: str, default: int, minimum: int = 0, maximum: Optional[int] = None) -> int:
    """Read an integer environment variable, falling back on bad input."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default

    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer, using {default}")
        return default

    if value < minimum or (maximum is not None and value > maximum):
        logger.warning(f"Ignoring {name}={value}: out of range, using {default}")
        return default

    return value

def load_environment_config() -> MessageConfig:
    """Load configuration from environment variables."""
    global DEBUG_ENABLED, VERBOSE_LOGGING, LOG_LEVEL, MODIFIER_FILE

    DEBUG_ENABLED = os.environ.get("DEBUG", "false").lower() == "true"
    VERBOSE_LOGGING = os.environ.get("VERBOSE", "false").lower() == "true"

    if DEBUG_ENABLED:
        LOG_LEVEL = "DEBUG"
    elif VERBOSE_LOGGING:
        LOG_LEVEL = "INFO"

    MODIFIER_FILE = os.environ.get("DBALOG_MODIFIER_FILE") or None

    return MessageConfig(
        nesting_decrement=_int_from_env("DBALOG_NESTING_DECREMENT", DEFAULT_NESTING_DECREMENT),
        max_message_count=_int_from_env("DBALOG_MAX_MESSAGES", MAX_MESSAGE_COUNT, minimum=1),
        max_error_count=_int_from_env("DBALOG_MAX_ERRORS", MAX_ERROR_COUNT, minimum=1),
        maximum_info_level=_int_from_env(
            "DBALOG_MAXIMUM_INFO_LEVEL", MAXIMUM_INFO_LEVEL,
            minimum=MIN_MESSAGE_LEVEL, maximum=MAX_MESSAGE_LEVEL
        ),
        modifier_file=MODIFIER_FILE,
    )

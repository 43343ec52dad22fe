"""
Argument validation for the dbalog message system.

The require_* helpers raise LevelValidationError so that level resolution
fails fast instead of producing a degraded result. check_modifier_pattern
follows the (is_valid, error_message) convention used by the tools.
"""
import logging
from collections.abc import Sequence
from typing import Optional, Tuple

from .errors import LevelValidationError

logger = logging.getLogger(__name__)

# Maximum allowed length for names and wildcard patterns
MAX_NAME_LENGTH = 256


def require_text(name: str, value) -> str:
    """Return value if it is a non-blank string, else raise."""
    if value is None:
        raise LevelValidationError(f"'{name}' is required")
    if not isinstance(value, str):
        raise LevelValidationError(f"'{name}' must be a string, got {type(value).__name__}")
    if not value.strip():
        raise LevelValidationError(f"'{name}' must not be empty")
    return value


def require_bool(name: str, value) -> bool:
    """Return value if it is a bool, else raise."""
    if not isinstance(value, bool):
        raise LevelValidationError(f"'{name}' must be a boolean, got {value!r}")
    return value


def require_int(name: str, value) -> int:
    """Return value if it is an int (bool excluded), else raise."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise LevelValidationError(f"'{name}' must be an integer, got {value!r}")
    return value


def normalize_tags(tags) -> Tuple[str, ...]:
    """
    Normalize a tag sequence.

    None means no tags. A bare string is rejected because iterating it would
    silently turn "backup" into six one-letter tags.
    """
    if tags is None:
        return ()
    if isinstance(tags, (str, bytes)) or not isinstance(tags, (Sequence, set, frozenset)):
        raise LevelValidationError(f"'tags' must be a list of strings, got {type(tags).__name__}")

    result = []
    for tag in tags:
        if not isinstance(tag, str):
            raise LevelValidationError(f"Tag {tag!r} is not a string")
        tag = tag.strip()
        if tag:
            result.append(tag)
    return tuple(result)


def check_modifier_pattern(pattern: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate a function or module wildcard pattern.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if pattern is None:
        return True, None

    if not isinstance(pattern, str):
        return False, f"Pattern must be a string, got {type(pattern).__name__}"

    if not pattern.strip():
        return False, "Empty pattern"

    if len(pattern) > MAX_NAME_LENGTH:
        return False, f"Pattern too long ({len(pattern)} chars, max {MAX_NAME_LENGTH})"

    if pattern.count("[") != pattern.count("]"):
        return False, f"Unbalanced brackets in pattern '{pattern}'"

    return True, None

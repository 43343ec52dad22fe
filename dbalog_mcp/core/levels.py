"""
Message levels for the dbalog message system.

Levels form a closed range from 1 (critical, always shown) to 9 (internal
comments). Arithmetic is done directly on the ordinal and the result is
clamped back into range.
"""
import logging
from enum import IntEnum
from typing import Union

from ..config import MIN_MESSAGE_LEVEL, MAX_MESSAGE_LEVEL, MAXIMUM_INFO_LEVEL
from .errors import LevelValidationError


class MessageLevel(IntEnum):
    """Message level, lower is more severe."""
    CRITICAL = 1
    IMPORTANT = 2
    SIGNIFICANT = 3
    VERY_VERBOSE = 4
    VERBOSE = 5
    SOMEWHAT_VERBOSE = 6
    SYSTEM = 7
    DEBUG = 8
    INTERNAL_COMMENT = 9


LevelLike = Union[MessageLevel, int, str]


def clamp_level(number: int) -> MessageLevel:
    """Clamp an arbitrary integer into the valid level range."""
    if number < MIN_MESSAGE_LEVEL:
        number = MIN_MESSAGE_LEVEL
    if number > MAX_MESSAGE_LEVEL:
        number = MAX_MESSAGE_LEVEL
    return MessageLevel(number)


def parse_level(value: LevelLike) -> MessageLevel:
    """
    Convert a level given as enum, integer, numeric string or name.

    Names are matched case-insensitively and ignore underscores, so
    "VeryVerbose", "very_verbose" and "VERY_VERBOSE" are all accepted.

    Raises:
        LevelValidationError: if the value is missing or not a valid level
    """
    if value is None:
        raise LevelValidationError("Message level is required")

    if isinstance(value, MessageLevel):
        return value

    # bool is an int subclass but never a meaningful level
    if isinstance(value, bool):
        raise LevelValidationError(f"Invalid message level: {value!r}")

    if isinstance(value, int):
        if MIN_MESSAGE_LEVEL <= value <= MAX_MESSAGE_LEVEL:
            return MessageLevel(value)
        raise LevelValidationError(
            f"Message level {value} is outside the range {MIN_MESSAGE_LEVEL}-{MAX_MESSAGE_LEVEL}"
        )

    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return parse_level(int(text))

        key = text.replace("_", "").replace(" ", "").lower()
        for level in MessageLevel:
            if level.name.replace("_", "").lower() == key:
                return level

    raise LevelValidationError(f"Invalid message level: {value!r}")


def to_logging_level(level: MessageLevel, maximum_info_level: int = MAXIMUM_INFO_LEVEL) -> int:
    """Map a message level to the stdlib logging level it is forwarded at."""
    if level == MessageLevel.CRITICAL:
        return logging.WARNING
    if level <= maximum_info_level:
        return logging.INFO
    return logging.DEBUG

"""
In-memory message and error logs.

Every message written through the message front end is kept in a bounded
ring buffer, and every error in a second, smaller one. The log retrieval
tools query these buffers with simple equality, wildcard and membership
filters.
"""
import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from fnmatch import fnmatchcase
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import MAX_ERROR_COUNT, MAX_MESSAGE_COUNT
from .levels import LevelLike, MessageLevel, parse_level
from .validation import normalize_tags

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogEntry:
    """A message as it was written, with its resolved level."""
    message: str
    level: MessageLevel
    original_level: MessageLevel
    function_name: str
    module_name: str
    tags: Tuple[str, ...] = ()
    target: Optional[str] = None
    execution_id: Optional[str] = None
    thread_name: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
            "level": self.level.name,
            "level_number": int(self.level),
            "original_level": self.original_level.name,
            "function_name": self.function_name,
            "module_name": self.module_name,
            "tags": list(self.tags),
            "target": self.target,
            "execution_id": self.execution_id,
            "thread_name": self.thread_name,
        }


@dataclass(frozen=True)
class ErrorEntry:
    """An error recorded by a command."""
    message: str
    function_name: str
    module_name: str
    tags: Tuple[str, ...] = ()
    target: Optional[str] = None
    execution_id: Optional[str] = None
    exception_type: Optional[str] = None
    exception_message: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
            "function_name": self.function_name,
            "module_name": self.module_name,
            "tags": list(self.tags),
            "target": self.target,
            "execution_id": self.execution_id,
            "exception_type": self.exception_type,
            "exception_message": self.exception_message,
        }


def _like(value: Optional[str], pattern: str) -> bool:
    if pattern in (None, "", "*"):
        return True
    return value is not None and fnmatchcase(value.lower(), pattern.lower())


def _select_executions(entries: list, last: int, skip: int) -> list:
    """Keep entries of the last N executions after skipping the newest `skip`."""
    order: List[str] = []
    seen = set()
    for entry in entries:
        if entry.execution_id and entry.execution_id not in seen:
            seen.add(entry.execution_id)
            order.append(entry.execution_id)

    end = len(order) - skip
    if end <= 0:
        return []
    wanted = set(order[max(0, end - last):end])
    return [e for e in entries if e.execution_id in wanted]


class MessageLog:
    """
    Bounded, thread-safe store for log and error entries.

    When a buffer is full the oldest entry is dropped.
    """

    def __init__(self, max_messages: int = MAX_MESSAGE_COUNT, max_errors: int = MAX_ERROR_COUNT):
        self._messages: deque = deque(maxlen=max_messages)
        self._errors: deque = deque(maxlen=max_errors)
        self._lock = threading.Lock()

    @property
    def max_messages(self) -> int:
        return self._messages.maxlen

    @property
    def max_errors(self) -> int:
        return self._errors.maxlen

    def add_entry(self, entry: LogEntry):
        with self._lock:
            self._messages.append(entry)

    def add_error(self, entry: ErrorEntry):
        with self._lock:
            self._errors.append(entry)

    def resize(self, max_messages: int = None, max_errors: int = None):
        """Change buffer sizes, keeping the newest entries."""
        with self._lock:
            if max_messages is not None:
                if max_messages < 1:
                    raise ValueError("max_messages must be at least 1")
                self._messages = deque(self._messages, maxlen=max_messages)
            if max_errors is not None:
                if max_errors < 1:
                    raise ValueError("max_errors must be at least 1")
                self._errors = deque(self._errors, maxlen=max_errors)

        logger.debug(f"Message log resized to {self.max_messages} messages / {self.max_errors} errors")

    def clear(self):
        """Empty both buffers."""
        with self._lock:
            self._messages.clear()
            self._errors.clear()
        logger.debug("Message log cleared")

    def get_entries(
        self,
        function_name: str = "*",
        module_name: str = "*",
        target: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        execution_id: Optional[str] = None,
        min_level: Optional[LevelLike] = None,
        max_level: Optional[LevelLike] = None,
        last: int = 0,
        skip: int = 0
    ) -> List[LogEntry]:
        """
        Query the message buffer.

        Args:
            function_name: Wildcard on the originating function
            module_name: Wildcard on the originating module
            target: Exact target match
            tags: Keep entries carrying any of these tags
            execution_id: Keep entries of one command execution
            min_level: Lowest level number to include
            max_level: Highest level number to include
            last: Keep only the last N command executions (0 for all)
            skip: Skip the newest N executions before applying last

        Returns:
            Matching entries, oldest first
        """
        with self._lock:
            entries = list(self._messages)

        wanted_tags = {t.lower() for t in normalize_tags(tags)}
        low = int(parse_level(min_level)) if min_level is not None else None
        high = int(parse_level(max_level)) if max_level is not None else None

        result = []
        for entry in entries:
            if not _like(entry.function_name, function_name):
                continue
            if not _like(entry.module_name, module_name):
                continue
            if target is not None and entry.target != target:
                continue
            if wanted_tags and not wanted_tags.intersection(t.lower() for t in entry.tags):
                continue
            if execution_id is not None and entry.execution_id != execution_id:
                continue
            if low is not None and entry.level < low:
                continue
            if high is not None and entry.level > high:
                continue
            result.append(entry)

        if last > 0 or skip > 0:
            result = _select_executions(result, last if last > 0 else len(result), skip)

        return result

    def get_errors(
        self,
        function_name: str = "*",
        module_name: str = "*",
        execution_id: Optional[str] = None
    ) -> List[ErrorEntry]:
        """Query the error buffer, oldest first."""
        with self._lock:
            errors = list(self._errors)

        return [
            e for e in errors
            if _like(e.function_name, function_name)
            and _like(e.module_name, module_name)
            and (execution_id is None or e.execution_id == execution_id)
        ]

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "message_count": len(self._messages),
                "error_count": len(self._errors),
                "max_messages": self._messages.maxlen,
                "max_errors": self._errors.maxlen,
            }


# Global message log instance
_global_log = None

def get_message_log() -> MessageLog:
    """Get the global message log instance."""
    global _global_log
    if _global_log is None:
        _global_log = MessageLog()
    return _global_log

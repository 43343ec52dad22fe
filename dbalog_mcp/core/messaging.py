"""
Message front end for administration commands.

Commands write diagnostic messages through a MessageWriter bound to their
module. Each message gets its effective level from the level resolver, is
recorded in the in-memory message log and is forwarded to the standard
logging package. stop_function is the guarded path commands use to report a
failure and either continue or abort.
"""
import logging
import threading
from typing import Any, Optional, Sequence

from .. import config
from .errors import CommandStoppedError
from .level_resolver import LevelResolver, get_level_resolver
from .levels import LevelLike, MessageLevel, parse_level, to_logging_level
from .log_store import ErrorEntry, LogEntry, MessageLog, get_message_log
from .nesting import NestingTracker
from .validation import normalize_tags, require_text


def _target_text(target: Any) -> Optional[str]:
    if target is None:
        return None
    return target if isinstance(target, str) else repr(target)


class MessageWriter:
    """Writes messages on behalf of one module."""

    def __init__(
        self,
        module_name: str,
        resolver: LevelResolver = None,
        log: MessageLog = None,
        tracker: NestingTracker = None,
        maximum_info_level: int = None
    ):
        self.module_name = require_text("module_name", module_name)
        self.resolver = resolver if resolver is not None else get_level_resolver()
        self.log = log if log is not None else get_message_log()
        self.tracker = tracker if tracker is not None else self.resolver.tracker
        self.maximum_info_level = maximum_info_level if maximum_info_level is not None else config.MAXIMUM_INFO_LEVEL
        self.logger = logging.getLogger(module_name)

    def write_message(
        self,
        level: LevelLike,
        message: str,
        *,
        function_name: str = None,
        tags: Optional[Sequence[str]] = None,
        target: Any = None,
        error: BaseException = None,
        from_guarded_call: bool = False
    ) -> LogEntry:
        """
        Write a message.

        Args:
            level: Nominal level of the message
            message: Message text
            function_name: Originating function (innermost command scope if None)
            tags: Tags for filtering and modifier matching
            target: Object the message is about
            error: Exception to record in the error log alongside the message
            from_guarded_call: True when written by a guard layer

        Returns:
            The recorded LogEntry
        """
        return self._write(
            level, message, function_name, tags, target, error, from_guarded_call
        )

    def _write(
        self, level, message, function_name, tags, target, error,
        from_guarded_call, forward_level: int = None
    ) -> LogEntry:
        original = parse_level(level)
        function_name = function_name or self.tracker.current_function
        tags = normalize_tags(tags)

        resolved = self.resolver.resolve(
            original, function_name, self.module_name,
            tags=tags, from_guarded_call=from_guarded_call, depth=self.tracker.depth
        )

        entry = LogEntry(
            message=message,
            level=resolved,
            original_level=original,
            function_name=function_name,
            module_name=self.module_name,
            tags=tags,
            target=_target_text(target),
            execution_id=self.tracker.execution_id,
            thread_name=threading.current_thread().name,
        )
        self.log.add_entry(entry)

        if error is not None:
            self._record_error(message, function_name, tags, target, error)

        if forward_level is None:
            forward_level = to_logging_level(resolved, self.maximum_info_level)
        self.logger.log(forward_level, f"[{function_name}] {message}")
        return entry

    def stop_function(
        self,
        message: str,
        *,
        function_name: str = None,
        error: BaseException = None,
        target: Any = None,
        tags: Optional[Sequence[str]] = None,
        level: LevelLike = MessageLevel.IMPORTANT,
        enable_exception: bool = False
    ) -> ErrorEntry:
        """
        Report that the current command cannot continue.

        The message is written through a guarded scope and always recorded in
        the error log. With enable_exception the caller is aborted with
        CommandStoppedError; otherwise the error entry is returned and the
        caller decides whether to skip the current item.

        Raises:
            CommandStoppedError: if enable_exception is True
        """
        function_name = function_name or self.tracker.current_function
        tags = normalize_tags(tags)

        with self.tracker.scope("stop_function", guarded=True):
            self._write(
                level, message, function_name, tags, target, None,
                from_guarded_call=True, forward_level=logging.WARNING
            )
            error_entry = self._record_error(message, function_name, tags, target, error)

        if enable_exception:
            raise CommandStoppedError(
                message, function_name=function_name, target=_target_text(target)
            ) from error

        return error_entry

    def _record_error(self, message, function_name, tags, target, error) -> ErrorEntry:
        entry = ErrorEntry(
            message=message,
            function_name=function_name,
            module_name=self.module_name,
            tags=tags,
            target=_target_text(target),
            execution_id=self.tracker.execution_id,
            exception_type=type(error).__name__ if error is not None else None,
            exception_message=str(error) if error is not None else None,
        )
        self.log.add_error(entry)
        return entry


def get_message_writer(module_name: str) -> MessageWriter:
    """Create a writer for a module using the global resolver and log."""
    return MessageWriter(module_name)

"""
Explicit nesting depth tracking for commands.

Commands enter a scope when they start and leave it when they finish. The
number of active scopes is the nesting depth the level resolver uses to make
deeply nested work less verbose. Scopes are stored in a context variable, so
every thread and every asyncio task sees its own stack.
"""
import functools
import inspect
import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScopeFrame:
    """One active command scope."""
    name: str
    execution_id: str
    guarded: bool = False


_frames: ContextVar[Tuple[ScopeFrame, ...]] = ContextVar("dbalog_scope_frames", default=())


class NestingTracker:
    """
    Tracks the stack of active command scopes.

    depth is the number of active scopes minus one: a message written by the
    outermost command is at depth 0, one written outside any command at -1.
    """

    def frames(self) -> Tuple[ScopeFrame, ...]:
        """Return the active frames, outermost first."""
        return _frames.get()

    @property
    def depth(self) -> int:
        return len(_frames.get()) - 1

    @property
    def execution_id(self) -> Optional[str]:
        """Identifier shared by all scopes below the outermost command."""
        frames = _frames.get()
        return frames[0].execution_id if frames else None

    @property
    def current_function(self) -> Optional[str]:
        """Name of the innermost scope that is not a guard layer."""
        for frame in reversed(_frames.get()):
            if not frame.guarded:
                return frame.name
        return None

    @contextmanager
    def scope(self, name: str, guarded: bool = False) -> Iterator[ScopeFrame]:
        """
        Enter a command scope for the duration of the with block.

        The outermost scope mints a new execution id; nested scopes inherit it.
        """
        frames = _frames.get()
        execution_id = frames[0].execution_id if frames else uuid.uuid4().hex
        frame = ScopeFrame(name=name, execution_id=execution_id, guarded=guarded)

        token = _frames.set(frames + (frame,))
        logger.debug(f"Entered scope '{name}' (depth: {len(frames)})")
        try:
            yield frame
        finally:
            _frames.reset(token)

    def command(self, func):
        """Decorator running func inside a scope named after it."""
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                with self.scope(func.__name__):
                    return await func(*args, **kwargs)
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with self.scope(func.__name__):
                return func(*args, **kwargs)
        return wrapper


# Global tracker instance; state itself lives in the context variable
_global_tracker = NestingTracker()

def get_nesting_tracker() -> NestingTracker:
    """Get the global nesting tracker instance."""
    return _global_tracker

def command(func):
    """Decorator marking func as a command scope on the global tracker."""
    return _global_tracker.command(func)

"""
Message level resolution.

Computes the effective level of a message from its nominal level, the
nesting depth it was written at and the level modifiers that match its
origin and tags. The arithmetic is a pure function over an explicit
ResolverSettings snapshot; LevelResolver owns the live settings and hands
out snapshots.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..config import DEFAULT_NESTING_DECREMENT
from .errors import LevelValidationError
from .level_modifiers import LevelModifier, ModifierRegistry, get_modifier_registry
from .levels import LevelLike, MessageLevel, clamp_level, parse_level
from .nesting import NestingTracker, get_nesting_tracker
from .validation import normalize_tags, require_bool, require_int, require_text

logger = logging.getLogger(__name__)

# A guarded call enters one extra scope before writing its message
GUARDED_CALL_DEPTH = 1


@dataclass(frozen=True)
class ResolverSettings:
    """Snapshot of the configuration level resolution depends on."""
    nesting_decrement: int = 0
    modifiers: Tuple[LevelModifier, ...] = ()


def resolve_level(
    original_level: LevelLike,
    from_guarded_call: bool,
    tags: Optional[Sequence[str]],
    function_name: str,
    module_name: str,
    *,
    settings: ResolverSettings,
    depth: int
) -> MessageLevel:
    """
    Compute the effective level of a single message.

    Args:
        original_level: Nominal level, 1-9 or a level name
        from_guarded_call: True if the message came through stop_function
        tags: Message tags, may be None
        function_name: Originating function
        module_name: Originating module
        settings: Nesting decrement and modifier snapshot
        depth: Nesting depth the message was written at

    Returns:
        MessageLevel clamped into 1-9

    Raises:
        LevelValidationError: if any required input is missing or invalid
    """
    level = parse_level(original_level)
    require_bool("from_guarded_call", from_guarded_call)
    tags = normalize_tags(tags)
    require_text("function_name", function_name)
    require_text("module_name", module_name)
    require_int("depth", depth)
    if settings is None:
        raise LevelValidationError("'settings' is required")

    number = int(level)

    if settings.nesting_decrement > 0:
        effective_depth = depth
        if from_guarded_call:
            effective_depth -= GUARDED_CALL_DEPTH
        number += effective_depth * settings.nesting_decrement

    for modifier in settings.modifiers:
        if modifier.applies_to(function_name, module_name, tags):
            number += modifier.modifier

    # Clamp once, after every term has been added
    return clamp_level(number)


class LevelResolver:
    """
    Resolves message levels against live configuration.

    Holds the nesting decrement and the modifier registry, and reads the
    nesting depth from a NestingTracker when none is passed explicitly.
    """

    def __init__(
        self,
        registry: ModifierRegistry = None,
        tracker: NestingTracker = None,
        nesting_decrement: int = DEFAULT_NESTING_DECREMENT
    ):
        self.registry = registry if registry is not None else get_modifier_registry()
        self.tracker = tracker if tracker is not None else get_nesting_tracker()
        self._nesting_decrement = require_int("nesting_decrement", nesting_decrement)
        self._lock = threading.Lock()

    @property
    def nesting_decrement(self) -> int:
        with self._lock:
            return self._nesting_decrement

    def set_nesting_decrement(self, value: int) -> int:
        """Set the per-depth adjustment. Returns the previous value."""
        require_int("nesting_decrement", value)
        with self._lock:
            previous = self._nesting_decrement
            self._nesting_decrement = value
        logger.info(f"Nesting decrement changed from {previous} to {value}")
        return previous

    def snapshot(self) -> ResolverSettings:
        """Take a consistent copy of the settings for one resolution."""
        return ResolverSettings(
            nesting_decrement=self.nesting_decrement,
            modifiers=self.registry.snapshot()
        )

    def resolve(
        self,
        level: LevelLike,
        function_name: str,
        module_name: str,
        tags: Optional[Sequence[str]] = None,
        from_guarded_call: bool = False,
        depth: int = None
    ) -> MessageLevel:
        """
        Resolve a message level using the current settings.

        Args:
            level: Nominal level
            function_name: Originating function
            module_name: Originating module
            tags: Message tags
            from_guarded_call: True if written through a guard layer
            depth: Explicit nesting depth (tracker depth if None)

        Returns:
            Effective MessageLevel
        """
        if depth is None:
            depth = self.tracker.depth

        resolved = resolve_level(
            level, from_guarded_call, tags, function_name, module_name,
            settings=self.snapshot(), depth=depth
        )
        logger.debug(f"Level for {module_name}/{function_name}: {int(parse_level(level))} -> {int(resolved)} (depth: {depth})")
        return resolved


# Global level resolver instance
_global_resolver = None

def get_level_resolver() -> LevelResolver:
    """Get the global level resolver instance."""
    global _global_resolver
    if _global_resolver is None:
        _global_resolver = LevelResolver()
    return _global_resolver

"""
Level modifier rules.

A modifier shifts the level of every message it matches by a fixed amount.
Matching is done against the originating function name, module name and the
message tags. Rules live in a ModifierRegistry keyed by name; resolution works
on a snapshot so that rule updates never race with an in-flight message.
"""
import json
import logging
import threading
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from .errors import LevelValidationError, ModifierNotFoundError
from .validation import check_modifier_pattern, normalize_tags, require_int, require_text

logger = logging.getLogger(__name__)


def _like(value: str, pattern: str) -> bool:
    """Case-insensitive shell wildcard match."""
    return fnmatchcase(value.lower(), pattern.lower())


def _tag_set(tags: Optional[Iterable[str]]) -> FrozenSet[str]:
    return frozenset(tag.lower() for tag in normalize_tags(tags))


@dataclass(frozen=True)
class LevelModifier:
    """A named level adjustment with optional match criteria."""
    name: str
    modifier: int
    include_function_name: Optional[str] = None
    exclude_function_name: Optional[str] = None
    include_module_name: Optional[str] = None
    exclude_module_name: Optional[str] = None
    include_tags: FrozenSet[str] = field(default_factory=frozenset)
    exclude_tags: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        require_text("name", self.name)
        require_int("modifier", self.modifier)

        for attr in ("include_function_name", "exclude_function_name",
                     "include_module_name", "exclude_module_name"):
            is_valid, error = check_modifier_pattern(getattr(self, attr))
            if not is_valid:
                raise LevelValidationError(f"Invalid {attr}: {error}")

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "include_tags", _tag_set(self.include_tags))
        object.__setattr__(self, "exclude_tags", _tag_set(self.exclude_tags))

    def applies_to(self, function_name: str, module_name: str, tags: Optional[Iterable[str]]) -> bool:
        """
        Check whether this modifier applies to a message.

        Unset criteria always match. Include criteria must all match; any
        matching exclude criterion vetoes the modifier.
        """
        if self.include_function_name and not _like(function_name, self.include_function_name):
            return False
        if self.exclude_function_name and _like(function_name, self.exclude_function_name):
            return False

        if self.include_module_name and not _like(module_name, self.include_module_name):
            return False
        if self.exclude_module_name and _like(module_name, self.exclude_module_name):
            return False

        if self.include_tags or self.exclude_tags:
            message_tags = _tag_set(tags)
            if self.include_tags and not (self.include_tags & message_tags):
                return False
            if self.exclude_tags & message_tags:
                return False

        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "name": self.name,
            "modifier": self.modifier,
            "include_function_name": self.include_function_name,
            "exclude_function_name": self.exclude_function_name,
            "include_module_name": self.include_module_name,
            "exclude_module_name": self.exclude_module_name,
            "include_tags": sorted(self.include_tags),
            "exclude_tags": sorted(self.exclude_tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LevelModifier":
        """Build a modifier from a dictionary as produced by to_dict."""
        if not isinstance(data, dict):
            raise LevelValidationError(f"Modifier definition must be an object, got {type(data).__name__}")
        return cls(
            name=data.get("name"),
            modifier=data.get("modifier"),
            include_function_name=data.get("include_function_name"),
            exclude_function_name=data.get("exclude_function_name"),
            include_module_name=data.get("include_module_name"),
            exclude_module_name=data.get("exclude_module_name"),
            include_tags=data.get("include_tags") or (),
            exclude_tags=data.get("exclude_tags") or (),
        )


class ModifierRegistry:
    """
    Thread-safe store of level modifiers keyed by case-insensitive name.
    """

    def __init__(self):
        self._modifiers: Dict[str, LevelModifier] = {}
        self._lock = threading.Lock()

    def register(self, modifier: LevelModifier) -> LevelModifier:
        """Add a modifier, replacing any existing one with the same name."""
        with self._lock:
            replaced = modifier.name.lower() in self._modifiers
            self._modifiers[modifier.name.lower()] = modifier

        logger.debug(f"{'Replaced' if replaced else 'Registered'} level modifier '{modifier.name}' ({modifier.modifier:+d})")
        return modifier

    def remove(self, name: str) -> bool:
        """
        Remove a modifier by exact name.

        Returns:
            True if a modifier was removed, False if none had that name
        """
        with self._lock:
            removed = self._modifiers.pop(name.lower(), None)

        if removed:
            logger.debug(f"Removed level modifier '{removed.name}'")
        return removed is not None

    def require(self, name: str) -> LevelModifier:
        """Return the modifier with this exact name or raise ModifierNotFoundError."""
        with self._lock:
            modifier = self._modifiers.get(name.lower())
        if modifier is None:
            raise ModifierNotFoundError(f"No level modifier named '{name}'")
        return modifier

    def get(self, name_pattern: str = "*") -> List[LevelModifier]:
        """Return modifiers whose name matches the wildcard, sorted by name."""
        with self._lock:
            modifiers = list(self._modifiers.values())
        return sorted(
            (m for m in modifiers if _like(m.name, name_pattern)),
            key=lambda m: m.name.lower()
        )

    def snapshot(self) -> Tuple[LevelModifier, ...]:
        """Return an immutable copy of the current rule set."""
        with self._lock:
            return tuple(self._modifiers.values())

    def clear(self):
        """Remove all modifiers."""
        with self._lock:
            self._modifiers.clear()
        logger.debug("Level modifier registry cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._modifiers)

    def load_file(self, path: Union[str, Path]) -> int:
        """
        Register modifiers from a JSON file holding a list of definitions.

        The whole file is validated before anything is registered.

        Returns:
            Number of modifiers registered
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, list):
            raise LevelValidationError(f"Modifier file {path} must contain a JSON list")

        modifiers = [LevelModifier.from_dict(item) for item in data]
        for modifier in modifiers:
            self.register(modifier)

        logger.info(f"Loaded {len(modifiers)} level modifiers from {path}")
        return len(modifiers)

    def save_file(self, path: Union[str, Path]) -> int:
        """Write all modifiers to a JSON file. Returns the number written."""
        modifiers = self.get()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump([m.to_dict() for m in modifiers], f, indent=2)
        logger.info(f"Saved {len(modifiers)} level modifiers to {path}")
        return len(modifiers)


# Global registry instance
_global_registry = None

def get_modifier_registry() -> ModifierRegistry:
    """Get the global modifier registry instance."""
    global _global_registry
    if _global_registry is None:
        _global_registry = ModifierRegistry()
    return _global_registry

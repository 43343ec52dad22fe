"""
Server initialization module for the dbalog MCP server.

Applies the environment configuration to the global resolver and message
log and loads persisted level modifiers.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .. import config
from ..config import MessageConfig
from .level_resolver import get_level_resolver
from .log_store import get_message_log

logger = logging.getLogger(__name__)


@dataclass
class InitializationResult:
    """Results from the initialization sequence."""
    nesting_decrement: int
    max_messages: int
    max_errors: int
    modifiers_loaded: int = 0
    warnings: List[str] = field(default_factory=list)
    error_message: Optional[str] = None


class ServerInitializer:
    """Handles the initialization sequence for the dbalog MCP server."""

    def __init__(self, message_config: Optional[MessageConfig] = None):
        self.config = message_config or MessageConfig()

    def initialize(self) -> InitializationResult:
        """
        Run the initialization sequence.

        Returns:
            InitializationResult describing what was applied
        """
        logger.info("Starting dbalog MCP server initialization")

        resolver = get_level_resolver()
        message_log = get_message_log()

        resolver.set_nesting_decrement(self.config.nesting_decrement)
        message_log.resize(self.config.max_message_count, self.config.max_error_count)
        config.MAXIMUM_INFO_LEVEL = self.config.maximum_info_level

        result = InitializationResult(
            nesting_decrement=self.config.nesting_decrement,
            max_messages=message_log.max_messages,
            max_errors=message_log.max_errors
        )

        if self.config.modifier_file:
            self._load_modifiers(result)

        self._log_summary(result)
        logger.info("Server initialization completed")
        return result

    def _load_modifiers(self, result: InitializationResult):
        """Load the modifier file; a bad file is reported, not fatal."""
        try:
            result.modifiers_loaded = get_level_resolver().registry.load_file(self.config.modifier_file)
        except (OSError, ValueError) as e:
            # json.JSONDecodeError and LevelValidationError are both ValueErrors
            message = f"Failed to load level modifiers from {self.config.modifier_file}: {e}"
            logger.warning(message)
            result.warnings.append(message)
            result.error_message = message

    def _log_summary(self, result: InitializationResult):
        logger.info("Message configuration summary:")
        logger.info(f"  - Nesting decrement: {result.nesting_decrement}")
        logger.info(f"  - Message buffer: {result.max_messages}")
        logger.info(f"  - Error buffer: {result.max_errors}")
        logger.info(f"  - Level modifiers loaded: {result.modifiers_loaded}")
        if result.error_message:
            logger.info(f"  - Error: {result.error_message}")

import pytest

from dbalog_mcp import config
from dbalog_mcp.core import level_modifiers, level_resolver, log_store


@pytest.fixture(autouse=True)
def fresh_globals(monkeypatch):
    """Give every test its own global registry, resolver and message log."""
    monkeypatch.setattr(level_modifiers, "_global_registry", None)
    monkeypatch.setattr(level_resolver, "_global_resolver", None)
    monkeypatch.setattr(log_store, "_global_log", None)

    # Restored after the test even if the test changes them
    for name in ("MAXIMUM_INFO_LEVEL", "LOG_LEVEL", "DEBUG_ENABLED", "VERBOSE_LOGGING", "MODIFIER_FILE"):
        monkeypatch.setattr(config, name, getattr(config, name))

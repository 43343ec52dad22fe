import json
import logging

from dbalog_mcp import config
from dbalog_mcp.config import MessageConfig, load_environment_config
from dbalog_mcp.core.level_resolver import get_level_resolver
from dbalog_mcp.core.log_store import get_message_log
from dbalog_mcp.core.server_initialization import ServerInitializer

ENV_NAMES = [
    "DEBUG", "VERBOSE", "DBALOG_NESTING_DECREMENT", "DBALOG_MAX_MESSAGES",
    "DBALOG_MAX_ERRORS", "DBALOG_MAXIMUM_INFO_LEVEL", "DBALOG_MODIFIER_FILE",
]


def _clear_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    _clear_env(monkeypatch)
    cfg = load_environment_config()
    assert cfg == MessageConfig()
    assert config.DEBUG_ENABLED is False


def test_environment_values(monkeypatch, tmp_path):
    _clear_env(monkeypatch)
    modifier_file = str(tmp_path / "modifiers.json")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("DBALOG_NESTING_DECREMENT", "2")
    monkeypatch.setenv("DBALOG_MAX_MESSAGES", "50")
    monkeypatch.setenv("DBALOG_MAX_ERRORS", "5")
    monkeypatch.setenv("DBALOG_MAXIMUM_INFO_LEVEL", "6")
    monkeypatch.setenv("DBALOG_MODIFIER_FILE", modifier_file)

    cfg = load_environment_config()
    assert cfg.nesting_decrement == 2
    assert cfg.max_message_count == 50
    assert cfg.max_error_count == 5
    assert cfg.maximum_info_level == 6
    assert cfg.modifier_file == modifier_file
    assert config.LOG_LEVEL == "DEBUG"


def test_invalid_values_fall_back(monkeypatch, caplog):
    _clear_env(monkeypatch)
    monkeypatch.setenv("DBALOG_NESTING_DECREMENT", "lots")
    monkeypatch.setenv("DBALOG_MAX_MESSAGES", "0")
    monkeypatch.setenv("DBALOG_MAXIMUM_INFO_LEVEL", "12")

    with caplog.at_level(logging.WARNING, logger="dbalog_mcp.config"):
        cfg = load_environment_config()

    assert cfg.nesting_decrement == config.DEFAULT_NESTING_DECREMENT
    assert cfg.max_message_count == config.MAX_MESSAGE_COUNT
    assert cfg.maximum_info_level == config.MAXIMUM_INFO_LEVEL
    assert len(caplog.records) == 3


class TestServerInitializer:

    def test_applies_configuration(self):
        result = ServerInitializer(MessageConfig(
            nesting_decrement=1, max_message_count=20, max_error_count=3, maximum_info_level=5
        )).initialize()

        assert get_level_resolver().nesting_decrement == 1
        assert get_message_log().max_messages == 20
        assert get_message_log().max_errors == 3
        assert config.MAXIMUM_INFO_LEVEL == 5
        assert result.modifiers_loaded == 0
        assert result.error_message is None

    def test_loads_modifier_file(self, tmp_path):
        path = tmp_path / "modifiers.json"
        path.write_text(json.dumps([{"name": "quiet", "modifier": 2, "include_tags": ["registry"]}]))

        result = ServerInitializer(MessageConfig(modifier_file=str(path))).initialize()

        assert result.modifiers_loaded == 1
        assert get_level_resolver().registry.require("quiet").modifier == 2

    def test_bad_modifier_file_is_reported(self, tmp_path):
        path = tmp_path / "modifiers.json"
        path.write_text("{not json")

        result = ServerInitializer(MessageConfig(modifier_file=str(path))).initialize()

        assert result.modifiers_loaded == 0
        assert result.error_message is not None
        assert len(result.warnings) == 1

    def test_missing_modifier_file_is_reported(self, tmp_path):
        result = ServerInitializer(MessageConfig(modifier_file=str(tmp_path / "missing.json"))).initialize()
        assert "missing.json" in result.error_message

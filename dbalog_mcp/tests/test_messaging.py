"""
Tests for the message front end.
"""
import logging

import pytest

from dbalog_mcp.core.errors import CommandStoppedError, LevelValidationError
from dbalog_mcp.core.level_modifiers import LevelModifier, ModifierRegistry
from dbalog_mcp.core.level_resolver import LevelResolver
from dbalog_mcp.core.levels import MessageLevel
from dbalog_mcp.core.log_store import MessageLog
from dbalog_mcp.core.messaging import MessageWriter, get_message_writer
from dbalog_mcp.core.nesting import NestingTracker


@pytest.fixture
def tracker():
    return NestingTracker()


@pytest.fixture
def registry():
    return ModifierRegistry()


@pytest.fixture
def log():
    return MessageLog(max_messages=50, max_errors=10)


@pytest.fixture
def writer(tracker, registry, log):
    resolver = LevelResolver(registry=registry, tracker=tracker, nesting_decrement=1)
    return MessageWriter("dbatools", resolver=resolver, log=log, tracker=tracker)


class TestWriteMessage:

    def test_records_entry_with_scope_defaults(self, writer, tracker, log):
        with tracker.scope("copy_proxy"):
            entry = writer.write_message(MessageLevel.VERBOSE, "Copying proxy", tags=["proxy"], target="sql01")

        assert log.get_entries() == [entry]
        assert entry.function_name == "copy_proxy"
        assert entry.module_name == "dbatools"
        assert entry.level == MessageLevel.VERBOSE
        assert entry.tags == ("proxy",)
        assert entry.target == "sql01"
        assert entry.execution_id is not None

    def test_nested_message_is_less_verbose(self, writer, tracker):
        with tracker.scope("copy_proxy"):
            with tracker.scope("get_proxy"):
                entry = writer.write_message(3, "Reading proxies")

        assert entry.original_level == MessageLevel.SIGNIFICANT
        assert entry.level == MessageLevel.VERY_VERBOSE

    def test_modifiers_apply(self, writer, tracker, registry):
        registry.register(LevelModifier(name="quiet_registry", modifier=4, include_tags=["registry"]))
        with tracker.scope("set_alias"):
            entry = writer.write_message("Verbose", "Writing key", tags=["registry"])

        assert entry.level == MessageLevel.INTERNAL_COMMENT

    def test_non_string_target_uses_repr(self, writer, tracker):
        with tracker.scope("copy_proxy"):
            entry = writer.write_message(5, "msg", target={"server": "sql01"})
        assert entry.target == "{'server': 'sql01'}"

    def test_error_is_recorded(self, writer, tracker, log):
        with tracker.scope("get_publication"):
            writer.write_message(2, "Lookup failed", error=KeyError("pub"))

        error = log.get_errors()[0]
        assert error.exception_type == "KeyError"
        assert error.function_name == "get_publication"

    def test_function_name_required_outside_scope(self, writer):
        with pytest.raises(LevelValidationError):
            writer.write_message(5, "no origin")

    def test_explicit_function_name_outside_scope(self, writer, log):
        entry = writer.write_message(5, "loose", function_name="script")
        # depth -1 with decrement 1
        assert entry.level == MessageLevel.VERY_VERBOSE
        assert entry.execution_id is None

    def test_forwards_to_logging(self, writer, tracker, caplog):
        with caplog.at_level(logging.DEBUG, logger="dbatools"):
            with tracker.scope("copy_proxy"):
                writer.write_message(1, "critical thing")
                writer.write_message(2, "important thing")
                writer.write_message(7, "system thing")

        levels = [(r.levelno, r.getMessage()) for r in caplog.records if r.name == "dbatools"]
        assert levels == [
            (logging.WARNING, "[copy_proxy] critical thing"),
            (logging.INFO, "[copy_proxy] important thing"),
            (logging.DEBUG, "[copy_proxy] system thing"),
        ]


class TestStopFunction:

    def test_guarded_message_matches_direct_message(self, writer, tracker):
        with tracker.scope("copy_proxy"):
            direct = writer.write_message(3, "direct")
            writer.stop_function("stopped", level=3)

        stopped = writer.log.get_entries(function_name="copy_proxy")[-1]
        assert stopped.message == "stopped"
        assert stopped.function_name == "copy_proxy"
        assert stopped.level == direct.level

    def test_records_error_and_continues(self, writer, tracker, log):
        with tracker.scope("copy_proxy"):
            execution_id = tracker.execution_id
            error_entry = writer.stop_function(
                "Proxy already exists", error=RuntimeError("duplicate"), target="sql02"
            )
            still_running = tracker.depth

        assert still_running == 0
        assert error_entry.message == "Proxy already exists"
        assert error_entry.exception_message == "duplicate"
        assert error_entry.execution_id == execution_id
        assert log.get_errors() == [error_entry]

    def test_records_error_without_exception(self, writer, tracker):
        with tracker.scope("copy_proxy"):
            error_entry = writer.stop_function("Nothing to copy")
        assert error_entry.exception_type is None

    def test_enable_exception_raises_chained(self, writer, tracker, log):
        cause = ConnectionError("sql01 unreachable")
        with tracker.scope("copy_proxy"):
            with pytest.raises(CommandStoppedError) as excinfo:
                writer.stop_function("Cannot connect", error=cause, target="sql01", enable_exception=True)

        assert excinfo.value.__cause__ is cause
        assert excinfo.value.function_name == "copy_proxy"
        assert excinfo.value.target == "sql01"
        assert len(log.get_errors()) == 1

    def test_logs_warning(self, writer, tracker, caplog):
        with caplog.at_level(logging.DEBUG, logger="dbatools"):
            with tracker.scope("copy_proxy"):
                writer.stop_function("Skipping proxy", level=8)

        records = [r for r in caplog.records if r.name == "dbatools"]
        assert [r.levelno for r in records] == [logging.WARNING]


def test_get_message_writer_uses_globals():
    writer = get_message_writer("dbatools")
    entry = writer.write_message(4, "hello", function_name="script")
    assert writer.log.get_entries() == [entry]


def test_module_name_required():
    with pytest.raises(LevelValidationError):
        MessageWriter("")

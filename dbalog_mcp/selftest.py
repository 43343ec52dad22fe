"""
Hermetic self-test for the dbalog MCP server package.

Validates basic contracts without starting the server:
- level resolution clamps and applies modifiers
- the message front end records entries and errors
- Tool registry imports cleanly
"""
from __future__ import annotations


def _resolution() -> None:
    from dbalog_mcp.core import LevelModifier, MessageLevel, ResolverSettings, resolve_level

    settings = ResolverSettings(modifiers=(LevelModifier(name="loud", modifier=-5),))
    level = resolve_level(1, False, None, "selftest", "dbalog", settings=settings, depth=0)
    assert level == MessageLevel.CRITICAL


def _front_end() -> None:
    from dbalog_mcp.core import LevelResolver, MessageLog, MessageWriter, ModifierRegistry, NestingTracker

    tracker = NestingTracker()
    log = MessageLog(max_messages=8, max_errors=8)
    writer = MessageWriter(
        "selftest",
        resolver=LevelResolver(registry=ModifierRegistry(), tracker=tracker),
        log=log,
        tracker=tracker
    )
    with tracker.scope("run_selftest"):
        writer.write_message(5, "hello")
        writer.stop_function("stopping", error=RuntimeError("stub"))

    assert len(log.get_entries()) == 2
    assert log.get_errors()[0].exception_type == "RuntimeError"


def _tools_import() -> None:
    from dbalog_mcp.tools import get_tool_info
    info = get_tool_info()
    assert "categories" in info and info["total_tools"] >= 1


def main() -> int:
    _resolution()
    _front_end()
    _tools_import()
    print("Selftest OK")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

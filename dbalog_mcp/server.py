#!/usr/bin/env python
"""
dbalog MCP Server

Main entry point for the MCP server that exposes message level resolution,
level modifier management and the in-memory message logs to MCP clients.
"""
import argparse
import logging
from typing import Dict

from fastmcp import FastMCP

from . import config
from .config import LOG_FORMAT, MessageConfig, load_environment_config
from .tools import register_all_tools, get_tool_info
from .core.server_initialization import ServerInitializer


def _configure_logging() -> MessageConfig:
    message_config = load_environment_config()
    logging.basicConfig(level=getattr(logging, config.LOG_LEVEL), format=LOG_FORMAT)
    if config.DEBUG_ENABLED:
        logging.getLogger(__name__).setLevel(logging.DEBUG)
        logging.getLogger("fastmcp").setLevel(logging.DEBUG)
    return message_config


class DbaLogMCPServer:
    """Main dbalog MCP Server class."""

    def __init__(self, message_config: MessageConfig = None) -> None:
        self.mcp = FastMCP("dbalog")
        self.initializer = ServerInitializer(message_config)
        self.logger = logging.getLogger(__name__)

    def start(self) -> None:
        """Start the dbalog MCP Server."""
        try:
            self._log_startup_banner()
            self.initializer.initialize()
            self._register_tools()
            self.logger.info("MCP server ready. Listening on stdio.")
            self._run_server()
        except Exception as e:  # pragma: no cover - startup path
            self.logger.error(f"Failed to start server: {e}")
            raise

    def _log_startup_banner(self) -> None:
        tool_info: Dict = get_tool_info()
        self.logger.info("dbalog MCP Server")
        self.logger.info("=" * 40)
        self.logger.info(f"Total tools: {tool_info['total_tools']}")
        self.logger.info("Tool categories:")
        for category, details in tool_info["categories"].items():
            self.logger.info(f"  {category}: {len(details['tools'])} tools")

    def _register_tools(self) -> None:
        self.logger.debug("Registering tools…")
        register_all_tools(self.mcp)

    def _run_server(self) -> None:
        try:
            self.mcp.run()
        except KeyboardInterrupt:
            pass


def main(argv: list[str] | None = None) -> int:
    message_config = _configure_logging()
    parser = argparse.ArgumentParser(prog="dbalog-mcp", description="dbalog MCP server")
    parser.add_argument("--list-tools", action="store_true", help="Print available tools and exit")
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__
        print(__version__)
        return 0

    if args.list_tools:
        info = get_tool_info()
        print(f"Total tools: {info['total_tools']}")
        for cat, details in info["categories"].items():
            print(f"- {cat}: {', '.join(details['tools'])}")
        return 0

    server = DbaLogMCPServer(message_config)
    server.start()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

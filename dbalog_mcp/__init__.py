"""
dbalog MCP server.

Diagnostic message layer for database administration commands: message level
resolution, level modifier rules, nesting-aware verbosity and the in-memory
message and error logs.
"""

__version__ = "0.1.0"

#!/usr/bin/env python
"""
Entry point for dbalog_mcp when run as a module.
"""
from .server import main

if __name__ == "__main__":
    raise SystemExit(main())

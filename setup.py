"""
Setup script for the dbalog MCP Server.
"""
from setuptools import setup, find_packages

# Read requirements from requirements.txt
with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="dbalog-mcp",
    version="0.1.0",
    description="Model Context Protocol server for database administration message levels and logs",
    long_description="Message level resolution, level modifier rules and in-memory message logs for database administration commands, exposed over the Model Context Protocol.",
    packages=find_packages(exclude=["*.tests", "*.tests.*"]),
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "dbalog-mcp=dbalog_mcp.server:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "Topic :: Database",
        "Topic :: System :: Logging",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)

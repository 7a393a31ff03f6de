"""MCP Server Builder -- generate Model Context Protocol server projects.

Parses a loosely formatted model response into a structured record, renders a
server entry file from the template registry and writes a complete project
(entry file, manifest, README, config files) for TypeScript, JavaScript or
Python.
"""

__version__ = "0.1.0"

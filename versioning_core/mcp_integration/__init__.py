"""
Module Communication Protocol (MCP) integration for the revision store.

This package provides the tool interface through which external agents
create and list revisions.
"""

from versioning_core.mcp_integration.mcp_endpoint import SimpleVersioningMCP, TOOL_DEFINITIONS

__all__ = ["SimpleVersioningMCP", "TOOL_DEFINITIONS"]

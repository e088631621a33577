"""
MCP endpoint implementation for the revision store.

This module exposes the revision store to external agents as two tools,
create_revision and list_revisions, and routes command dictionaries to them.
"""

from typing import Any, Dict, List, Mapping, Optional

from versioning_core.config import get_config
from versioning_core.monitoring.structured_logger import LoggingContext, OperationLogger, get_logger
from versioning_core.versioning.exceptions import RevisionStoreError
from versioning_core.versioning.revision_store import RevisionStore


TOOL_DEFINITIONS = [
    {
        "name": "create_revision",
        "description": (
            "Creates a new revision with the provided files. "
            "Takes a map of relative file paths to file contents."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "files": {
                    "type": "object",
                    "description": "Relative file path mapped to the file content",
                    "additionalProperties": {"type": "string"},
                }
            },
            "required": ["files"],
        },
    },
    {
        "name": "list_revisions",
        "description": "Lists all existing revision numbers",
        "input_schema": {"type": "object", "properties": {}},
    },
]


class SimpleVersioningMCP:
    """
    MCP interface for the revision store.

    Every tool call returns a response dictionary with a "status" field;
    failures are reported as {"status": "error", ...} instead of raised.
    """

    def __init__(self, store: Optional[RevisionStore] = None, config=None):
        """
        Initialize the MCP interface.

        Args:
            store: Revision store to serve; built from configuration when omitted
            config: ConfigManager to read settings from; the global one when omitted
        """
        self.config = config or get_config()
        self.store = store or RevisionStore.from_config(self.config)
        self.max_preview_files = self.config.config.mcp.max_preview_files
        self.logger = get_logger(__name__, component="mcp")

    def get_tool_definitions(self) -> List[Dict[str, Any]]:
        """Describe the tools this endpoint serves."""
        return [dict(tool) for tool in TOOL_DEFINITIONS]

    def create_revision(self, files: Mapping[str, str]) -> Dict[str, Any]:
        """
        Create a revision from a mapping of relative paths to contents.

        Args:
            files: Relative file path mapped to file content

        Returns:
            Dictionary with the new revision number and its location
        """
        with LoggingContext(), OperationLogger(self.logger, "create_revision") as op:
            try:
                revision = self.store.create_revision(files)
            except (RevisionStoreError, TypeError) as e:
                op.failure(e)
                return self._error_response(e)

            paths = sorted(files)
            op.success(revision=revision, file_count=len(paths))
            return {
                "status": "success",
                "revision": revision,
                "file_count": len(paths),
                "files": paths[: self.max_preview_files],
                "path": str(self.store.revision_path(revision)),
            }

    def list_revisions(self) -> Dict[str, Any]:
        """
        List the existing revision numbers.

        Returns:
            Dictionary with the ascending revision numbers and their count
        """
        with LoggingContext(), OperationLogger(self.logger, "list_revisions") as op:
            try:
                revisions = self.store.list_revisions()
            except RevisionStoreError as e:
                op.failure(e)
                return self._error_response(e)

            op.success(count=len(revisions))
            return {"status": "success", "revisions": revisions, "count": len(revisions)}

    def execute_mcp_command(self, command: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute an MCP command received from an external system.

        Args:
            command: Dictionary with the command details
                    (e.g., {'action': 'create_revision', 'files': {...}})

        Returns:
            Response dictionary based on the command
        """
        if not command or "action" not in command:
            return {
                "status": "error",
                "message": "Invalid command format: 'action' field is required",
            }

        action = command["action"]

        if action == "create_revision":
            if "files" not in command:
                return {"status": "error", "message": "Missing required field: 'files'"}
            if not isinstance(command["files"], Mapping):
                return {
                    "status": "error",
                    "message": "Field 'files' must map relative paths to contents",
                }
            return self.create_revision(command["files"])

        elif action == "list_revisions":
            return self.list_revisions()

        elif action == "list_tools":
            return {"status": "success", "tools": self.get_tool_definitions()}

        else:
            return {"status": "error", "message": f"Unknown action: {action}"}

    @staticmethod
    def _error_response(error: Exception) -> Dict[str, Any]:
        response = {
            "status": "error",
            "error_type": type(error).__name__,
            "message": str(error),
        }
        path = getattr(error, "path", None)
        if path is not None:
            response["path"] = str(path)
        return response

"""Input graph exceptions: dangling references, malformed documents."""

from typing import Optional

from .base import NamecheckError


class GraphError(NamecheckError):
    """Base class for errors in the service graph handed to the resolver."""

    pass


class UnknownNodeError(GraphError):
    """Raised when a node references an id that is not in the graph."""

    def __init__(self, node_id: str, referenced_by: Optional[str] = None):
        details = {"node_id": node_id}
        if referenced_by:
            details["referenced_by"] = referenced_by

        super().__init__(f"Unknown graph node: {node_id}", details=details)
        self.node_id = node_id
        self.referenced_by = referenced_by


class InvalidGraphError(GraphError):
    """Raised when the graph (or the document describing it) is malformed."""

    def __init__(self, reason: str, node_id: Optional[str] = None):
        details = {"reason": reason}
        if node_id:
            details["node_id"] = node_id

        super().__init__(f"Invalid service graph: {reason}", details=details)
        self.reason = reason
        self.node_id = node_id

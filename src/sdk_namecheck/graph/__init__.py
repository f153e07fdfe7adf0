"""Service graph: the immutable input of the naming engine.

Usage:
    from sdk_namecheck.graph import GraphBuilder

    b = GraphBuilder()
    svc = b.service("MyService")
    ...
    graph = b.build()
"""

from .builder import GraphBuilder, validate_graph
from .loader import graph_from_dict, load_graph
from .models import (
    ALL_SCOPES,
    DECLARABLE_KINDS,
    ClientDecl,
    ClientRef,
    EnumMember,
    InterfaceNode,
    NamespaceName,
    NamespaceNode,
    OperationNode,
    Property,
    Relocation,
    ScopedNames,
    ServiceGraph,
    TypeKind,
    TypeNode,
)

__all__ = [
    "ALL_SCOPES",
    "DECLARABLE_KINDS",
    "GraphBuilder",
    "validate_graph",
    "load_graph",
    "graph_from_dict",
    "ClientDecl",
    "ClientRef",
    "EnumMember",
    "InterfaceNode",
    "NamespaceName",
    "NamespaceNode",
    "OperationNode",
    "Property",
    "Relocation",
    "ScopedNames",
    "ServiceGraph",
    "TypeKind",
    "TypeNode",
]

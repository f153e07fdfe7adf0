"""Analyzer implementations: fill the ResolutionStore."""

from .names import NameResolver, NameSource, NameTable, ResolvedName, pascal_case
from .topology import ClientNode, ClientTopology, ClientTopologyBuilder, build_topology
from .usage import UsageClassifier, UsageFlags, UsageTable, classify_usage


def get_default_analyzers() -> list:
    """Return the analyzers (topo-sorted by requires/provides at run time).

    1. UsageClassifier: requires graph, provides usage
    2. NameResolver: requires graph, provides names
    3. ClientTopologyBuilder: requires names, provides topology
    """
    return [
        UsageClassifier(),
        NameResolver(),
        ClientTopologyBuilder(),
    ]


__all__ = [
    "ClientNode",
    "ClientTopology",
    "ClientTopologyBuilder",
    "NameResolver",
    "NameSource",
    "NameTable",
    "ResolvedName",
    "UsageClassifier",
    "UsageFlags",
    "UsageTable",
    "build_topology",
    "classify_usage",
    "get_default_analyzers",
    "pascal_case",
]

"""
SDK Namecheck - client-facing name resolution and collision checks.

Resolves the name every type, operation and client of a service graph is
emitted under, per target language, and reports the names that collide
or had to be synthesized.
"""

__version__ = "0.3.0"

from .api import analyze
from .config import NamingConfig, load_config
from .graph import GraphBuilder, ServiceGraph, graph_from_dict, load_graph
from .resolution import Diagnostic, NamingKernel, NamingResult, Severity

__all__ = [
    "analyze",  # Main entry point
    "NamingKernel",  # Advanced usage (direct kernel access)
    "NamingConfig",
    "NamingResult",
    "Diagnostic",
    "Severity",
    "GraphBuilder",
    "ServiceGraph",
    "graph_from_dict",
    "load_graph",
    "load_config",
]

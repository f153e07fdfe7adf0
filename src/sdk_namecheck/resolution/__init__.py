"""Resolution pipeline: blackboard store, analyzers, rules and the kernel.

Usage:
    from sdk_namecheck.resolution import NamingKernel

    result = NamingKernel(graph, config).run()
    for d in result.diagnostics:
        print(d.code, d.message)
"""

from .analyzers import (
    ClientNode,
    ClientTopology,
    NameSource,
    NameTable,
    ResolvedName,
    UsageFlags,
    UsageTable,
)
from .kernel import NamingKernel
from .models import (
    DUPLICATE_CLIENT_NAME,
    DUPLICATE_CLIENT_NAME_WARNING,
    NO_UNNAMED_TYPES,
    Diagnostic,
    NamingResult,
    Severity,
)
from .store import ResolutionStore, Slot

__all__ = [
    "ClientNode",
    "ClientTopology",
    "DUPLICATE_CLIENT_NAME",
    "DUPLICATE_CLIENT_NAME_WARNING",
    "Diagnostic",
    "NO_UNNAMED_TYPES",
    "NameSource",
    "NameTable",
    "NamingKernel",
    "NamingResult",
    "ResolutionStore",
    "ResolvedName",
    "Severity",
    "Slot",
    "UsageFlags",
    "UsageTable",
]

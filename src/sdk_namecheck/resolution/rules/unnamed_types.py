"""NO_UNNAMED_TYPES: emitted types whose client name had to be synthesized.

Models are skipped when they are long-running initial envelopes or
multipart bodies, since those shapes are anonymous by construction.
Unions made only of builtin scalars are skipped as trivial. A nullable
wrapper delegates to its inner union, model or enum: the inner type is
reported once, under its own id, however many wrappers reach it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ...graph.models import ServiceGraph, TypeKind, TypeNode
from ..analyzers.usage import UsageFlags
from ..models import NO_UNNAMED_TYPES, Diagnostic, Severity

if TYPE_CHECKING:
    from ..store import ResolutionStore

_WRAPPER_USAGE = UsageFlags.LRO_INITIAL | UsageFlags.MULTIPART_FORM_DATA


def _type_to_check(graph: ServiceGraph, node: TypeNode) -> Optional[TypeNode]:
    if node.kind != TypeKind.NULLABLE:
        return node
    inner = graph.types[node.inner]
    if inner.kind in (TypeKind.UNION, TypeKind.MODEL, TypeKind.ENUM):
        return inner
    return None


def _all_variants_builtin(graph: ServiceGraph, node: TypeNode) -> bool:
    if node.kind != TypeKind.UNION:
        return False
    return all(graph.types[v].kind == TypeKind.BUILTIN for v in node.variants)


class NoUnnamedTypesRule:
    """Flags reachable anonymous types so authors can give them real names."""

    name = "no_unnamed_types"
    requires = frozenset({"usage", "names"})
    error_mode = "skip"

    def check(self, store: ResolutionStore) -> list[Diagnostic]:
        if not store.config.report_unnamed_types:
            return []
        if not (store.usage.available and store.names.available):
            return []

        graph = store.graph
        usage = store.usage.value
        names = store.names.value
        scope = store.config.language_scope
        diagnostics: list[Diagnostic] = []
        reported: set[str] = set()

        def report(node: TypeNode, kind: str) -> None:
            reported.add(node.id)
            diagnostics.append(
                Diagnostic(
                    code=NO_UNNAMED_TYPES,
                    severity=Severity.WARNING,
                    target=node.id,
                    params={"type": kind, "generatedName": names.name(node.id, scope)},
                )
            )

        for node in graph.types.values():
            # A type reached directly and through its nullable wrapper is one finding
            checked = _type_to_check(graph, node)
            if checked is None or checked.id in reported:
                continue
            if not (usage.is_used(checked.id) and names.is_generated_name(checked.id, scope)):
                continue

            if checked.kind == TypeKind.MODEL:
                if not usage.has(checked.id, _WRAPPER_USAGE):
                    report(checked, "model")
            elif checked.kind in (TypeKind.UNION, TypeKind.ENUM):
                if not _all_variants_builtin(graph, checked):
                    report(checked, "union")

        return diagnostics

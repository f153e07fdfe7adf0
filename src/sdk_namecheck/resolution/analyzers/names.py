"""Name resolution: the client-facing name of every node, per language scope.

Precedence (highest first):
    1. override for the specific language scope being resolved
    2. override for ALL_SCOPES
    3. author-declared name (generic instantiations are mangled:
       Response<int32> -> ResponseInt32)
    4. synthesized name for anonymous types (flagged as generated)

Synthesized names come from the nearest named container:

    property ``status`` of model Widget       -> WidgetStatus
    request body of operation ``create``      -> CreateRequest
    response of operation ``getWidget``       -> GetWidgetResponse
    error response of ``getWidget``           -> GetWidgetError
    parameter ``filter`` of ``list``          -> ListFilter
    variant 2 of union WidgetKind             -> WidgetKindVariant2

Containers are claimed first-come in a fixed walk (operations in graph
order, then named types, then leftovers), so every anonymous node owns
exactly one context. A suffix already taken under the same owner is
numbered (a second anonymous response becomes GetWidgetResponse2).
Anonymous types reachable from nowhere get ``Unnamed<Kind><n>``.
"""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ...exceptions import UnknownNodeError
from ...graph.models import (
    ALL_SCOPES,
    DECLARABLE_KINDS,
    ScopedNames,
    ServiceGraph,
    TypeKind,
    TypeNode,
)
from ...logging_config import get_logger
from ..store import ResolutionStore

logger = get_logger(__name__)

_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")


def pascal_case(name: str) -> str:
    """Upper-case the first letter of every word, leaving the rest untouched.

    >>> pascal_case("int32"), pascal_case("getWidget"), pascal_case("etag_value")
    ('Int32', 'GetWidget', 'EtagValue')
    """
    return "".join(word[:1].upper() + word[1:] for word in _WORD_SPLIT.split(name) if word)


class NameSource(Enum):
    SCOPED_OVERRIDE = "scoped_override"
    GLOBAL_OVERRIDE = "global_override"
    DECLARED = "declared"
    TEMPLATE = "template"
    SYNTHESIZED = "synthesized"


@dataclass(frozen=True)
class ResolvedName:
    name: str
    source: NameSource

    @property
    def is_generated(self) -> bool:
        return self.source == NameSource.SYNTHESIZED

    @property
    def from_override(self) -> bool:
        return self.source in (NameSource.SCOPED_OVERRIDE, NameSource.GLOBAL_OVERRIDE)


@dataclass(frozen=True)
class NamingContext:
    """Where an anonymous type was first met: owner id plus the suffix it adds."""

    owner: str
    suffix: str


def member_id(owner_id: str, member_name: str) -> str:
    """Identity of a property or enum member inside its owner."""
    return f"{owner_id}::{member_name}"


def unwrap_nullable(graph: ServiceGraph, type_id: str) -> str:
    node = graph.types[type_id]
    while node.kind == TypeKind.NULLABLE:
        node = graph.types[node.inner]
    return node.id


def _override(overrides: ScopedNames, scope: str) -> Optional[ResolvedName]:
    hit = overrides.lookup(scope)
    if hit is None:
        return None
    name, from_scope = hit
    source = NameSource.GLOBAL_OVERRIDE if from_scope == ALL_SCOPES else NameSource.SCOPED_OVERRIDE
    return ResolvedName(name, source)


class NameTable:
    """Memoised name lookups for one graph.

    Entries are computed on first request and never change afterwards, so
    every consumer sees the same answer regardless of query order.
    """

    def __init__(self, graph: ServiceGraph, scopes: tuple[str, ...] = (ALL_SCOPES,)):
        self.graph = graph
        self.scopes = scopes
        self._contexts, self._orphans = collect_naming_contexts(graph)
        self._memo: dict[tuple[str, str], ResolvedName] = {}

    # ── lookups ─────────────────────────────────────────────────────

    def resolve(self, node_id: str, scope: str = ALL_SCOPES) -> ResolvedName:
        key = (node_id, scope)
        cached = self._memo.get(key)
        if cached is None:
            cached = self._compute(node_id, scope)
            self._memo[key] = cached
        return cached

    def name(self, node_id: str, scope: str = ALL_SCOPES) -> str:
        return self.resolve(node_id, scope).name

    def is_generated_name(self, node_id: str, scope: str = ALL_SCOPES) -> bool:
        return self.resolve(node_id, scope).is_generated

    def resolve_member(self, owner_id: str, name: str, scope: str = ALL_SCOPES) -> ResolvedName:
        """Name of a property (models) or member (enums) of ``owner_id``."""
        key = (member_id(owner_id, name), scope)
        cached = self._memo.get(key)
        if cached is not None:
            return cached
        owner = self.graph.types.get(owner_id)
        if owner is None:
            raise UnknownNodeError(owner_id)
        for member in (*owner.properties, *owner.members):
            if member.name == name:
                cached = _override(member.overrides, scope) or ResolvedName(name, NameSource.DECLARED)
                self._memo[key] = cached
                return cached
        raise UnknownNodeError(member_id(owner_id, name), referenced_by=owner_id)

    def context_of(self, type_id: str) -> Optional[NamingContext]:
        return self._contexts.get(unwrap_nullable(self.graph, type_id))

    def namespace_of(self, type_id: str) -> Optional[str]:
        """Declared namespace, or the namespace of the naming context for anonymous types."""
        node = self.graph.types[unwrap_nullable(self.graph, type_id)]
        if node.namespace is not None:
            return node.namespace
        context = self._contexts.get(node.id)
        if context is None:
            return None
        if context.owner in self.graph.operations:
            op = self.graph.operations[context.owner]
            return self.graph.namespace_of_container(op.container)
        return self.namespace_of(context.owner)

    def as_dict(self) -> dict[str, dict[str, str]]:
        """Resolved name table: id -> {scope -> effective name}."""
        ids = [t.id for t in self.graph.types.values() if t.kind in DECLARABLE_KINDS]
        ids += list(self.graph.operations)
        ids += list(self.graph.interfaces)
        ids += list(self.graph.namespaces)
        ids += [c.id for c in self.graph.clients]
        return {node_id: {scope: self.name(node_id, scope) for scope in self.scopes} for node_id in ids}

    # ── computation ─────────────────────────────────────────────────

    def _compute(self, node_id: str, scope: str) -> ResolvedName:
        graph = self.graph
        if node_id in graph.types:
            return self._compute_type(graph.types[node_id], scope)
        node = graph.node(node_id)
        if node is None:
            raise UnknownNodeError(node_id)
        return _override(node.overrides, scope) or ResolvedName(node.name, NameSource.DECLARED)

    def _compute_type(self, node: TypeNode, scope: str) -> ResolvedName:
        if node.kind == TypeKind.NULLABLE:
            # A nullable wrapper is emitted under its inner type's name
            return self.resolve(node.inner, scope)
        if node.kind == TypeKind.BUILTIN:
            return ResolvedName(node.name, NameSource.DECLARED)
        if node.kind == TypeKind.CONSTANT:
            return ResolvedName(node.value or "", NameSource.DECLARED)

        overridden = _override(node.overrides, scope)
        if overridden is not None:
            return overridden

        if node.name is not None:
            if node.template_args:
                mangled = node.name + "".join(
                    pascal_case(self.name(arg, scope)) for arg in node.template_args
                )
                return ResolvedName(mangled, NameSource.TEMPLATE)
            return ResolvedName(node.name, NameSource.DECLARED)

        return ResolvedName(self._synthesize(node, scope), NameSource.SYNTHESIZED)

    def _synthesize(self, node: TypeNode, scope: str) -> str:
        context = self._contexts.get(node.id)
        if context is None:
            return f"Unnamed{pascal_case(node.kind.value)}{self._orphans[node.id]}"
        if context.owner in self.graph.operations:
            owner_name = pascal_case(self.name(context.owner, scope))
        else:
            owner_name = self.name(context.owner, scope)
        return owner_name + context.suffix


def collect_naming_contexts(
    graph: ServiceGraph,
) -> tuple[dict[str, NamingContext], dict[str, int]]:
    """Assign every anonymous declarable type exactly one naming context.

    Returns:
        (contexts, orphans): contexts maps type id -> NamingContext; orphans
        maps ids of anonymous types no container reaches -> 1-based index
        within their kind.
    """
    contexts: dict[str, NamingContext] = {}
    orphans: dict[str, int] = {}
    queue: deque[str] = deque()
    used_suffixes: set[tuple[str, str]] = set()

    def claim(type_id: Optional[str], owner: str, suffix: str) -> None:
        if type_id is None:
            return
        target = graph.types[unwrap_nullable(graph, type_id)]
        if target.name is not None or target.kind not in DECLARABLE_KINDS:
            return
        if target.id in contexts or target.id in orphans:
            return
        # Second anonymous response of one owner: GetWidgetResponse2
        unique, n = suffix, 1
        while (owner, unique) in used_suffixes:
            n += 1
            unique = f"{suffix}{n}"
        used_suffixes.add((owner, unique))
        contexts[target.id] = NamingContext(owner, unique)
        queue.append(target.id)

    def name_dependencies(type_id: str) -> set[str]:
        """Types whose names feed into the name of ``type_id`` (template args, transitively)."""
        node = graph.types[unwrap_nullable(graph, type_id)]
        deps: set[str] = set()
        if node.name is not None:
            for arg in node.template_args:
                arg_id = unwrap_nullable(graph, arg)
                deps.add(arg_id)
                deps |= name_dependencies(arg_id)
        else:
            context = contexts.get(node.id)
            if context is not None and context.owner in graph.types:
                deps |= name_dependencies(context.owner)
        return deps

    def drain() -> None:
        while queue:
            owner = graph.types[queue.popleft()]
            # Nothing the owner's own name is built from may be named after the owner
            excluded = name_dependencies(owner.id)
            for prop in owner.properties:
                if unwrap_nullable(graph, prop.type_id) not in excluded:
                    claim(prop.type_id, owner.id, pascal_case(prop.name))
            for index, variant in enumerate(owner.variants, start=1):
                if unwrap_nullable(graph, variant) not in excluded:
                    claim(variant, owner.id, f"Variant{index}")
            if owner.base is not None and owner.base not in excluded:
                claim(owner.base, owner.id, "Base")

    for op in graph.operations.values():
        claim(op.body, op.id, "Request")
        for param in op.parameters:
            claim(param.type_id, op.id, pascal_case(param.name))
        for response in op.responses:
            claim(response, op.id, "Response")
        for error in op.errors:
            claim(error, op.id, "Error")
        claim(op.lro_initial, op.id, "InitialResponse")
        drain()

    for node in graph.types.values():
        if node.name is not None and node.kind in DECLARABLE_KINDS:
            queue.append(node.id)
            drain()

    counters: dict[TypeKind, int] = {}
    for node in graph.types.values():
        if node.name is None and node.kind in DECLARABLE_KINDS and node.id not in contexts:
            if node.id in orphans:
                continue
            counters[node.kind] = counters.get(node.kind, 0) + 1
            orphans[node.id] = counters[node.kind]
            queue.append(node.id)
            drain()

    return contexts, orphans


def collect_scopes(graph: ServiceGraph, extra: tuple[str, ...] = ()) -> tuple[str, ...]:
    """ALL_SCOPES followed by every language scope the graph or caller mentions."""
    scopes: set[str] = set(extra)
    for overrides in graph.iter_overrides():
        scopes |= overrides.scopes()
    for op in graph.operations.values():
        scopes.update(r.scope for r in op.relocations)
    scopes.discard(ALL_SCOPES)
    return (ALL_SCOPES, *sorted(scopes))


class NameResolver:
    """Populates store.names with a lazily-filled NameTable."""

    name = "names"
    requires = frozenset({"graph"})
    provides = frozenset({"names"})
    error_mode = "fail"

    def analyze(self, store: ResolutionStore) -> None:
        scopes = collect_scopes(store.graph, (store.config.language_scope,))
        table = NameTable(store.graph, scopes)
        store.names.set(table, produced_by=self.name)
        logger.debug(f"Names: {len(scopes)} scope(s): {', '.join(scopes)}")

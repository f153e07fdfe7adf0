"""Immutable service graph handed over by the type-checker.

Ontology:
  Containers:  namespaces (some flagged as services), interfaces, explicit clients
  Surface:     operations living in an interface or a namespace
  Types:       models, enums, unions, nullable wrappers, plus the leaves
               (builtin scalars and literal constants) they bottom out in

Every node is addressed by a stable string id. Cross references are ids, never
object pointers, so the graph can be frozen even when models refer to each
other recursively.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping, Optional, Union

ALL_SCOPES = "AllScopes"


@dataclass(frozen=True)
class ScopedNames:
    """Explicit name overrides keyed by language scope.

    An entry under ALL_SCOPES applies to every language; any other key
    applies to that language only and wins over the ALL_SCOPES entry.
    """

    entries: tuple[tuple[str, str], ...] = ()

    @classmethod
    def of(cls, overrides: Optional[Mapping[str, str]] = None) -> ScopedNames:
        if not overrides:
            return EMPTY_NAMES
        return cls(tuple(sorted(overrides.items())))

    def lookup(self, scope: str) -> Optional[tuple[str, str]]:
        """Return (name, scope that supplied it) or None when no override applies."""
        table = dict(self.entries)
        if scope != ALL_SCOPES and scope in table:
            return table[scope], scope
        if ALL_SCOPES in table:
            return table[ALL_SCOPES], ALL_SCOPES
        return None

    def scopes(self) -> set[str]:
        return {scope for scope, _ in self.entries if scope != ALL_SCOPES}

    def __bool__(self) -> bool:
        return bool(self.entries)


EMPTY_NAMES = ScopedNames()


class TypeKind(Enum):
    MODEL = "model"
    ENUM = "enum"
    UNION = "union"
    NULLABLE = "nullable"
    BUILTIN = "builtin"
    CONSTANT = "constant"


# Kinds that are emitted as named declarations and can therefore collide.
DECLARABLE_KINDS = frozenset({TypeKind.MODEL, TypeKind.ENUM, TypeKind.UNION})


@dataclass(frozen=True)
class Property:
    """A model property or an operation parameter."""

    name: str
    type_id: str
    overrides: ScopedNames = EMPTY_NAMES


@dataclass(frozen=True)
class EnumMember:
    name: str
    overrides: ScopedNames = EMPTY_NAMES


@dataclass(frozen=True)
class TypeNode:
    """One node of the type graph.

    ``name`` is the author-declared name; None marks an anonymous (inline)
    type whose client name has to be synthesized. ``template_args`` is set
    on generic instantiations such as ``Response<int32>``.
    """

    id: str
    kind: TypeKind
    name: Optional[str] = None
    namespace: Optional[str] = None
    overrides: ScopedNames = EMPTY_NAMES
    properties: tuple[Property, ...] = ()
    variants: tuple[str, ...] = ()
    inner: Optional[str] = None
    members: tuple[EnumMember, ...] = ()
    template_args: tuple[str, ...] = ()
    base: Optional[str] = None
    value: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return self.name is None

    @property
    def is_leaf(self) -> bool:
        return self.kind in (TypeKind.BUILTIN, TypeKind.CONSTANT)

    def references(self) -> Iterator[str]:
        """Ids of every type this node structurally refers to."""
        for prop in self.properties:
            yield prop.type_id
        yield from self.variants
        if self.inner is not None:
            yield self.inner
        yield from self.template_args
        if self.base is not None:
            yield self.base


@dataclass(frozen=True)
class NamespaceNode:
    id: str
    name: str
    parent: Optional[str] = None
    is_service: bool = False
    versioned_by: Optional[str] = None
    overrides: ScopedNames = EMPTY_NAMES


@dataclass(frozen=True)
class InterfaceNode:
    id: str
    name: str
    namespace: str
    overrides: ScopedNames = EMPTY_NAMES


@dataclass(frozen=True)
class ClientRef:
    """Relocation target naming an existing interface or namespace node."""

    node_id: str


@dataclass(frozen=True)
class NamespaceName:
    """Relocation target given as a bare string."""

    name: str


RelocationTarget = Union[ClientRef, NamespaceName]


@dataclass(frozen=True)
class Relocation:
    target: RelocationTarget
    scope: str = ALL_SCOPES


@dataclass(frozen=True)
class OperationNode:
    id: str
    name: str
    container: str
    overrides: ScopedNames = EMPTY_NAMES
    body: Optional[str] = None
    parameters: tuple[Property, ...] = ()
    responses: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    lro_initial: Optional[str] = None
    multipart: bool = False
    merge_patch: bool = False
    relocations: tuple[Relocation, ...] = ()

    def relocation_for(self, scope: str) -> Optional[Relocation]:
        """Relocation in effect for ``scope``.

        A directive for the exact scope wins; otherwise an ALL_SCOPES
        directive applies. The ALL_SCOPES view only honours ALL_SCOPES
        directives.
        """
        fallback = None
        for relocation in self.relocations:
            if relocation.scope == scope:
                return relocation
            if relocation.scope == ALL_SCOPES:
                fallback = relocation
        return fallback


@dataclass(frozen=True)
class ClientDecl:
    """An explicitly declared client combining one or more services."""

    id: str
    name: str
    services: tuple[str, ...]
    overrides: ScopedNames = EMPTY_NAMES


Node = Union[TypeNode, NamespaceNode, InterfaceNode, OperationNode, ClientDecl]


@dataclass(frozen=True)
class ServiceGraph:
    """The finalized graph. Mappings preserve declaration order."""

    types: Mapping[str, TypeNode] = field(default_factory=dict)
    namespaces: Mapping[str, NamespaceNode] = field(default_factory=dict)
    interfaces: Mapping[str, InterfaceNode] = field(default_factory=dict)
    operations: Mapping[str, OperationNode] = field(default_factory=dict)
    clients: tuple[ClientDecl, ...] = ()

    def node(self, node_id: str) -> Optional[Node]:
        for table in (self.types, self.operations, self.interfaces, self.namespaces):
            if node_id in table:
                return table[node_id]
        for client in self.clients:
            if client.id == node_id:
                return client
        return None

    def namespace_path(self, namespace_id: Optional[str]) -> tuple[str, ...]:
        """Fully qualified name segments of a namespace, outermost first."""
        path: list[str] = []
        current = namespace_id
        while current is not None:
            ns = self.namespaces[current]
            path.append(ns.name)
            current = ns.parent
        return tuple(reversed(path))

    def service_of(self, namespace_id: Optional[str]) -> Optional[str]:
        """Closest enclosing service namespace (the namespace itself included)."""
        current = namespace_id
        while current is not None:
            ns = self.namespaces[current]
            if ns.is_service:
                return ns.id
            current = ns.parent
        return None

    def namespace_of_container(self, container_id: str) -> str:
        """Namespace an operation container lives in."""
        if container_id in self.interfaces:
            return self.interfaces[container_id].namespace
        return container_id

    def child_namespaces(self, namespace_id: str) -> list[NamespaceNode]:
        return [ns for ns in self.namespaces.values() if ns.parent == namespace_id]

    def interfaces_in(self, namespace_id: str) -> list[InterfaceNode]:
        return [i for i in self.interfaces.values() if i.namespace == namespace_id]

    def services(self) -> list[NamespaceNode]:
        return [ns for ns in self.namespaces.values() if ns.is_service]

    def iter_overrides(self) -> Iterator[ScopedNames]:
        """Every override map in the graph, members and parameters included."""
        for node in self.types.values():
            yield node.overrides
            for prop in node.properties:
                yield prop.overrides
            for member in node.members:
                yield member.overrides
        for op in self.operations.values():
            yield op.overrides
            for param in op.parameters:
                yield param.overrides
        for iface in self.interfaces.values():
            yield iface.overrides
        for ns in self.namespaces.values():
            yield ns.overrides
        for client in self.clients:
            yield client.overrides

"""Fluent construction of a ServiceGraph.

Ids are derived from the qualified declaration name so that rebuilding the
same description always yields the same ids:

    namespace      MyService.SubA
    model          MyService.SubA.Foo
    instantiation  MyService.Response<int32>
    operation      MyService.A.get
    builtin        int32
    anonymous      union#3   (counter shared by all anonymous nodes)

Example:
    >>> b = GraphBuilder()
    >>> svc = b.service("MyService")
    >>> foo = b.model("Foo", namespace=svc, properties={"a": b.builtin("string")})
    >>> b.operation("getFoo", container=svc, responses=[foo])
    'MyService.getFoo'
    >>> graph = b.build()
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Union

from ..exceptions import InvalidGraphError, UnknownNodeError
from ..logging_config import get_logger
from .models import (
    ALL_SCOPES,
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

logger = get_logger(__name__)

# A property spec is either a bare type id or (type id, overrides).
# Overrides are either {scope: name} or a bare name meaning ALL_SCOPES.
Overrides = Union[str, Mapping[str, str], None]
PropertySpec = Union[str, tuple[str, Overrides]]
MemberSpec = Union[str, tuple[str, Overrides]]


def _names(overrides: Overrides) -> ScopedNames:
    if isinstance(overrides, str):
        return ScopedNames.of({ALL_SCOPES: overrides})
    return ScopedNames.of(overrides)


def _to_properties(specs: Optional[Mapping[str, PropertySpec]]) -> tuple[Property, ...]:
    if not specs:
        return ()
    result = []
    for name, spec in specs.items():
        if isinstance(spec, tuple):
            type_id, overrides = spec
            result.append(Property(name, type_id, _names(overrides)))
        else:
            result.append(Property(name, spec))
    return tuple(result)


def _to_members(specs: Optional[Iterable[MemberSpec]]) -> tuple[EnumMember, ...]:
    if not specs:
        return ()
    result = []
    for spec in specs:
        if isinstance(spec, tuple):
            name, overrides = spec
            result.append(EnumMember(name, _names(overrides)))
        else:
            result.append(EnumMember(spec))
    return tuple(result)


class GraphBuilder:
    """Accumulates nodes, then freezes and validates them in build()."""

    def __init__(self) -> None:
        self._types: dict[str, TypeNode] = {}
        self._namespaces: dict[str, NamespaceNode] = {}
        self._interfaces: dict[str, InterfaceNode] = {}
        self._operations: dict[str, OperationNode] = {}
        self._clients: list[ClientDecl] = []
        self._anonymous_counter = 0

    # ── ids ─────────────────────────────────────────────────────────

    def _qualify(self, namespace: Optional[str], name: str) -> str:
        return f"{namespace}.{name}" if namespace else name

    def _anonymous_id(self, kind: TypeKind) -> str:
        self._anonymous_counter += 1
        return f"{kind.value}#{self._anonymous_counter}"

    def _claim(self, node_id: str) -> str:
        taken = (
            node_id in self._types
            or node_id in self._namespaces
            or node_id in self._interfaces
            or node_id in self._operations
            or any(c.id == node_id for c in self._clients)
        )
        if taken:
            raise InvalidGraphError("duplicate node id", node_id=node_id)
        return node_id

    # ── containers ──────────────────────────────────────────────────

    def namespace(
        self,
        name: str,
        parent: Optional[str] = None,
        *,
        service: bool = False,
        versioned_by: Optional[str] = None,
        overrides: Overrides = None,
        id: Optional[str] = None,
    ) -> str:
        node_id = self._claim(id or self._qualify(parent, name))
        self._namespaces[node_id] = NamespaceNode(
            id=node_id,
            name=name,
            parent=parent,
            is_service=service,
            versioned_by=versioned_by,
            overrides=_names(overrides),
        )
        return node_id

    def service(self, name: str, parent: Optional[str] = None, **kwargs) -> str:
        return self.namespace(name, parent, service=True, **kwargs)

    def versioned(self, namespace_id: str, enum_id: str) -> None:
        """Attach the api-version enum once it has been declared inside the service."""
        ns = self._namespaces[namespace_id]
        self._namespaces[namespace_id] = NamespaceNode(
            id=ns.id,
            name=ns.name,
            parent=ns.parent,
            is_service=ns.is_service,
            versioned_by=enum_id,
            overrides=ns.overrides,
        )

    def interface(
        self,
        name: str,
        namespace: str,
        *,
        overrides: Overrides = None,
        id: Optional[str] = None,
    ) -> str:
        node_id = self._claim(id or self._qualify(namespace, name))
        self._interfaces[node_id] = InterfaceNode(
            id=node_id, name=name, namespace=namespace, overrides=_names(overrides)
        )
        return node_id

    def client(
        self,
        name: str,
        services: Iterable[str],
        *,
        overrides: Overrides = None,
        id: Optional[str] = None,
    ) -> str:
        node_id = self._claim(id or f"client:{name}")
        self._clients.append(
            ClientDecl(
                id=node_id,
                name=name,
                services=tuple(services),
                overrides=_names(overrides),
            )
        )
        return node_id

    # ── types ───────────────────────────────────────────────────────

    def builtin(self, name: str) -> str:
        """Builtin scalars are shared: asking twice returns the same id."""
        if name not in self._types:
            self._types[name] = TypeNode(id=name, kind=TypeKind.BUILTIN, name=name)
        return name

    def constant(self, value: str) -> str:
        node_id = f'"{value}"'
        if node_id not in self._types:
            self._types[node_id] = TypeNode(
                id=node_id, kind=TypeKind.CONSTANT, name=None, value=value
            )
        return node_id

    def _declare(
        self,
        kind: TypeKind,
        name: Optional[str],
        namespace: Optional[str],
        template_args: tuple[str, ...],
        explicit_id: Optional[str],
        **fields,
    ) -> str:
        if explicit_id:
            node_id = explicit_id
        elif name is None:
            node_id = self._anonymous_id(kind)
        elif template_args:
            node_id = f"{self._qualify(namespace, name)}<{','.join(template_args)}>"
        else:
            node_id = self._qualify(namespace, name)
        self._types[self._claim(node_id)] = TypeNode(
            id=node_id,
            kind=kind,
            name=name,
            namespace=namespace,
            template_args=template_args,
            **fields,
        )
        return node_id

    def model(
        self,
        name: Optional[str] = None,
        namespace: Optional[str] = None,
        *,
        properties: Optional[Mapping[str, PropertySpec]] = None,
        template_args: Iterable[str] = (),
        base: Optional[str] = None,
        overrides: Overrides = None,
        id: Optional[str] = None,
    ) -> str:
        return self._declare(
            TypeKind.MODEL,
            name,
            namespace,
            tuple(template_args),
            id,
            properties=_to_properties(properties),
            base=base,
            overrides=_names(overrides),
        )

    def enum(
        self,
        name: Optional[str] = None,
        namespace: Optional[str] = None,
        *,
        members: Optional[Iterable[MemberSpec]] = None,
        overrides: Overrides = None,
        id: Optional[str] = None,
    ) -> str:
        return self._declare(
            TypeKind.ENUM,
            name,
            namespace,
            (),
            id,
            members=_to_members(members),
            overrides=_names(overrides),
        )

    def union(
        self,
        name: Optional[str] = None,
        namespace: Optional[str] = None,
        *,
        variants: Iterable[str] = (),
        template_args: Iterable[str] = (),
        overrides: Overrides = None,
        id: Optional[str] = None,
    ) -> str:
        return self._declare(
            TypeKind.UNION,
            name,
            namespace,
            tuple(template_args),
            id,
            variants=tuple(variants),
            overrides=_names(overrides),
        )

    def nullable(self, inner: str, *, id: Optional[str] = None) -> str:
        """Nullable wrappers around the same inner type are shared."""
        node_id = id or f"{inner}?"
        existing = self._types.get(node_id)
        if existing is not None and existing.kind == TypeKind.NULLABLE and existing.inner == inner:
            return node_id
        self._claim(node_id)
        self._types[node_id] = TypeNode(id=node_id, kind=TypeKind.NULLABLE, inner=inner)
        return node_id

    # ── operations ──────────────────────────────────────────────────

    def operation(
        self,
        name: str,
        container: str,
        *,
        body: Optional[str] = None,
        parameters: Optional[Mapping[str, PropertySpec]] = None,
        responses: Iterable[str] = (),
        errors: Iterable[str] = (),
        lro_initial: Optional[str] = None,
        multipart: bool = False,
        merge_patch: bool = False,
        overrides: Overrides = None,
        relocations: Iterable[Relocation] = (),
        id: Optional[str] = None,
    ) -> str:
        node_id = self._claim(id or self._qualify(container, name))
        self._operations[node_id] = OperationNode(
            id=node_id,
            name=name,
            container=container,
            overrides=_names(overrides),
            body=body,
            parameters=_to_properties(parameters),
            responses=tuple(responses),
            errors=tuple(errors),
            lro_initial=lro_initial,
            multipart=multipart,
            merge_patch=merge_patch,
            relocations=tuple(relocations),
        )
        return node_id

    @staticmethod
    def move_to(target: str, scope: str = ALL_SCOPES) -> Relocation:
        """Relocation to an existing interface/namespace node id."""
        return Relocation(ClientRef(target), scope)

    @staticmethod
    def move_to_named(name: str, scope: str = ALL_SCOPES) -> Relocation:
        """Relocation to a client given by name only."""
        return Relocation(NamespaceName(name), scope)

    # ── freeze ──────────────────────────────────────────────────────

    def build(self) -> ServiceGraph:
        """Validate references and return the frozen graph.

        Raises:
            UnknownNodeError: If any node refers to an id that was never declared
            InvalidGraphError: If a node is structurally impossible
        """
        graph = ServiceGraph(
            types=dict(self._types),
            namespaces=dict(self._namespaces),
            interfaces=dict(self._interfaces),
            operations=dict(self._operations),
            clients=tuple(self._clients),
        )
        validate_graph(graph)
        logger.debug(
            f"Built graph: {len(graph.types)} types, {len(graph.operations)} operations, "
            f"{len(graph.namespaces)} namespaces"
        )
        return graph


def validate_graph(graph: ServiceGraph) -> None:
    """Check every cross reference in ``graph``."""

    def _require(table, ref: Optional[str], owner: str) -> None:
        if ref is not None and ref not in table:
            raise UnknownNodeError(ref, referenced_by=owner)

    for ns in graph.namespaces.values():
        _require(graph.namespaces, ns.parent, ns.id)
        _require(graph.types, ns.versioned_by, ns.id)
        if ns.versioned_by is not None and graph.types[ns.versioned_by].kind != TypeKind.ENUM:
            raise InvalidGraphError("versioned_by must reference an enum", node_id=ns.id)

    for node in graph.types.values():
        _require(graph.namespaces, node.namespace, node.id)
        for ref in node.references():
            _require(graph.types, ref, node.id)
        if node.kind == TypeKind.NULLABLE and node.inner is None:
            raise InvalidGraphError("nullable type without inner type", node_id=node.id)

    for iface in graph.interfaces.values():
        _require(graph.namespaces, iface.namespace, iface.id)

    containers = {**graph.interfaces, **graph.namespaces}
    for op in graph.operations.values():
        _require(containers, op.container, op.id)
        refs = [op.body, op.lro_initial, *op.responses, *op.errors]
        refs.extend(p.type_id for p in op.parameters)
        for ref in refs:
            _require(graph.types, ref, op.id)
        for relocation in op.relocations:
            if not relocation.scope:
                raise InvalidGraphError("relocation scope must not be empty", node_id=op.id)
            target = relocation.target
            if isinstance(target, ClientRef):
                _require(containers, target.node_id, op.id)
            elif not target.name:
                raise InvalidGraphError("relocation target name must not be empty", node_id=op.id)

    for client in graph.clients:
        if not client.services:
            raise InvalidGraphError("client must combine at least one service", node_id=client.id)
        for service in client.services:
            _require(graph.namespaces, service, client.id)
            if not graph.namespaces[service].is_service:
                raise InvalidGraphError(f"'{service}' is not a service namespace", node_id=client.id)

"""Client topology: which client each emitted operation lands in, per scope.

Root clients are the explicit client declarations, or one per service
namespace that no declaration covers. Interfaces and sub-namespaces of a
service become child clients of the client that owns their parent.

Relocation directives are applied after every operation has been placed
at home, so a moved operation is appended behind the operations already
living in its destination:

    ClientRef(node)        -> that node's client; synthesized under the
                              root when the node is not a client yet
    NamespaceName("X")     -> the client of namespace X when the operation's
                              own service declares one, else a new client
                              "<root>::X" shared by every directive naming X
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from ...graph.models import ClientRef, NamespaceName, OperationNode, ServiceGraph
from ...logging_config import get_logger
from ..store import ResolutionStore
from .names import NameTable

logger = get_logger(__name__)


@dataclass
class ClientNode:
    """One emission boundary in a topology.

    ``source`` is the graph node backing the client (namespace, interface or
    client declaration); None for clients created from a bare string target.
    """

    id: str
    name: str
    parent: Optional[str] = None
    source: Optional[str] = None
    synthesized: bool = False
    operations: list[str] = field(default_factory=list)
    children: list[str] = field(default_factory=list)


@dataclass
class ClientTopology:
    """Client tree for one language scope."""

    scope: str
    clients: dict[str, ClientNode] = field(default_factory=dict)
    roots: list[str] = field(default_factory=list)
    placement: dict[str, str] = field(default_factory=dict)  # op id -> client id
    home: dict[str, str] = field(default_factory=dict)  # op id -> client before relocation

    def client_of(self, op_id: str) -> Optional[ClientNode]:
        client_id = self.placement.get(op_id)
        return self.clients[client_id] if client_id is not None else None

    def is_relocated(self, op_id: str) -> bool:
        return op_id in self.placement and self.placement[op_id] != self.home[op_id]

    def root_of(self, client_id: str) -> str:
        current = self.clients[client_id]
        while current.parent is not None:
            current = self.clients[current.parent]
        return current.id

    def path(self, client_id: str) -> tuple[str, ...]:
        """Client names from the root down to ``client_id``."""
        names: list[str] = []
        current: Optional[str] = client_id
        while current is not None:
            node = self.clients[current]
            names.append(node.name)
            current = node.parent
        return tuple(reversed(names))

    def walk(self) -> Iterator[ClientNode]:
        """Depth-first, parents before children, in declaration order."""
        stack = list(reversed(self.roots))
        while stack:
            node = self.clients[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    @property
    def emitted(self) -> list[str]:
        """Ids of every placed operation, in client walk order."""
        return [op_id for client in self.walk() for op_id in client.operations]


class _TopologyBuilder:
    def __init__(self, graph: ServiceGraph, names: NameTable, scope: str):
        self.graph = graph
        self.names = names
        self.topology = ClientTopology(scope=scope)
        self.home_client: dict[str, str] = {}  # namespace / interface id -> client id

    def build(self) -> ClientTopology:
        self._add_roots()
        self._place_operations()
        self._apply_relocations()
        return self.topology

    def _add_client(self, node: ClientNode) -> None:
        self.topology.clients[node.id] = node
        if node.parent is None:
            self.topology.roots.append(node.id)
        else:
            self.topology.clients[node.parent].children.append(node.id)

    def _backed_client(self, node_id: str, parent: Optional[str], synthesized: bool = False) -> None:
        name = self.names.name(node_id, self.topology.scope)
        self._add_client(ClientNode(node_id, name, parent, node_id, synthesized))

    def _add_roots(self) -> None:
        graph = self.graph
        for decl in graph.clients:
            self._backed_client(decl.id, None)
            for service_id in decl.services:
                if service_id not in self.home_client:
                    self.home_client[service_id] = decl.id
                    self._add_children(service_id, decl.id)

        for service in graph.services():
            if service.id not in self.home_client:
                self._backed_client(service.id, None)
                self.home_client[service.id] = service.id
                self._add_children(service.id, service.id)

    def _add_children(self, namespace_id: str, client_id: str) -> None:
        for iface in self.graph.interfaces_in(namespace_id):
            self._backed_client(iface.id, client_id)
            self.home_client[iface.id] = iface.id
        for child in self.graph.child_namespaces(namespace_id):
            if child.is_service:
                continue  # nested services get their own root
            self._backed_client(child.id, client_id)
            self.home_client[child.id] = child.id
            self._add_children(child.id, child.id)

    def _place_operations(self) -> None:
        topology = self.topology
        for op in self.graph.operations.values():
            client_id = self.home_client.get(op.container)
            if client_id is None:
                continue  # outside every service: never emitted
            topology.clients[client_id].operations.append(op.id)
            topology.placement[op.id] = client_id
            topology.home[op.id] = client_id

    def _apply_relocations(self) -> None:
        topology = self.topology
        for op_id in list(topology.placement):
            op = self.graph.operations[op_id]
            relocation = op.relocation_for(topology.scope)
            if relocation is None:
                continue
            origin = topology.placement[op_id]
            target = self._destination(op, relocation.target, topology.root_of(origin))
            if target == origin:
                continue
            topology.clients[origin].operations.remove(op_id)
            topology.clients[target].operations.append(op_id)
            topology.placement[op_id] = target

    def _destination(self, op: OperationNode, target: object, root: str) -> str:
        graph = self.graph
        if isinstance(target, ClientRef):
            if target.node_id in self.home_client:
                return self.home_client[target.node_id]
            if target.node_id not in self.topology.clients:
                self._backed_client(target.node_id, root, synthesized=True)
            return target.node_id

        if isinstance(target, NamespaceName):
            service = graph.service_of(graph.namespace_of_container(op.container))
            for ns in graph.namespaces.values():
                if (
                    ns.name == target.name
                    and ns.id in self.home_client
                    and graph.service_of(ns.id) == service
                ):
                    return self.home_client[ns.id]
            client_id = f"{root}::{target.name}"
            if client_id not in self.topology.clients:
                self._add_client(ClientNode(client_id, target.name, root, None, synthesized=True))
            return client_id

        raise TypeError(f"Unsupported relocation target: {target!r}")


def build_topology(graph: ServiceGraph, names: NameTable, scope: str) -> ClientTopology:
    """Build the client tree for ``scope`` and place every emitted operation."""
    return _TopologyBuilder(graph, names, scope).build()


class ClientTopologyBuilder:
    """Populates store.topology with one ClientTopology per known scope."""

    name = "topology"
    requires = frozenset({"names"})
    provides = frozenset({"topology"})
    error_mode = "fail"

    def analyze(self, store: ResolutionStore) -> None:
        names = store.names.value
        topologies = {scope: build_topology(store.graph, names, scope) for scope in names.scopes}
        store.topology.set(topologies, produced_by=self.name)
        for scope, topology in topologies.items():
            moved = sum(1 for op_id in topology.placement if topology.is_relocated(op_id))
            logger.debug(
                f"Topology[{scope}]: {len(topology.clients)} clients, "
                f"{len(topology.placement)} operations, {moved} relocated"
            )

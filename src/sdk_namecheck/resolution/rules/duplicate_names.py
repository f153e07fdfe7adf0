"""DUPLICATE_CLIENT_NAME: two emitted entities share a name in one naming scope.

Naming scopes (bucket groups) per language scope:

    types       models, enums and unions of one namespace
    operations  operations placed in one client
    clients     child clients of one parent client
    members     properties of one model, members of one enum

Every entity in a colliding bucket gets its own diagnostic, so both sides
of a collision (a relocated operation and the incumbent it lands on) are
reported. Entities named by an explicit override get the ``default``
message; entities named by their declaration get ``non_decorator``.

When a flattening namespace is configured, types are additionally keyed
by name alone: one diagnostic per extra namespace that contributes a type
of an already-seen name. Flattening is a directive of the emitter being
served, so this pass runs in the emitter's language scope only; other
languages keep their namespaces.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional

from ...graph.models import ALL_SCOPES, DECLARABLE_KINDS, ServiceGraph
from ..analyzers.names import NameSource, NameTable, ResolvedName, member_id
from ..analyzers.usage import UsageFlags, UsageTable
from ..models import DUPLICATE_CLIENT_NAME, DUPLICATE_CLIENT_NAME_WARNING, Diagnostic, Severity

if TYPE_CHECKING:
    from ..analyzers.topology import ClientNode, ClientTopology
    from ..store import ResolutionStore


@dataclass(frozen=True)
class _Entry:
    entity: str
    resolved: ResolvedName


BucketKey = tuple[str, Optional[str], str]  # (group, owner, name)


def is_visible(usage: UsageTable, type_id: str) -> bool:
    """Emitted and not a per-service versioning enum."""
    flags = usage[type_id]
    return flags != UsageFlags.NONE and not flags & UsageFlags.API_VERSION_ENUM


class DuplicateClientNameRule:
    """Reports name collisions per language scope."""

    name = "duplicate_client_name"
    requires = frozenset({"usage", "names", "topology"})
    error_mode = "skip"

    def check(self, store: ResolutionStore) -> list[Diagnostic]:
        if not (store.usage.available and store.names.available and store.topology.available):
            return []

        config = store.config
        usage = store.usage.value
        names = store.names.value
        topologies = store.topology.value

        if config.tolerates_duplicates:
            code, severity = DUPLICATE_CLIENT_NAME_WARNING, Severity.WARNING
        else:
            code, severity = DUPLICATE_CLIENT_NAME, Severity.ERROR

        diagnostics: list[Diagnostic] = []
        baseline: dict[BucketKey, frozenset[str]] = {}

        for scope in names.scopes:
            buckets = self._buckets(store, usage, names, topologies[scope], scope)
            for key, entries in buckets.items():
                if len(entries) < 2:
                    continue
                entities = frozenset(e.entity for e in entries)
                if scope == ALL_SCOPES:
                    baseline[key] = entities
                elif baseline.get(key) == entities:
                    continue  # same collision already reported for every language
                for entry in entries:
                    diagnostics.append(
                        Diagnostic(
                            code=code,
                            severity=severity,
                            target=entry.entity,
                            params={"name": key[2], "scope": scope},
                            message_id="default" if entry.resolved.from_override else "non_decorator",
                        )
                    )

        if config.flatten_namespaces:
            scope = config.language_scope
            for entity in self._flattened_collisions(store, usage, names, scope):
                diagnostics.append(
                    Diagnostic(
                        code=code,
                        severity=severity,
                        target=entity,
                        params={"name": names.name(entity, scope), "scope": scope},
                    )
                )

        return diagnostics

    def _buckets(
        self,
        store: ResolutionStore,
        usage: UsageTable,
        names: NameTable,
        topology: ClientTopology,
        scope: str,
    ) -> dict[BucketKey, list[_Entry]]:
        buckets: dict[BucketKey, list[_Entry]] = {}

        def add(group: str, owner: Optional[str], entity: str, resolved: ResolvedName) -> None:
            entries = buckets.setdefault((group, owner, resolved.name), [])
            if all(e.entity != entity for e in entries):
                entries.append(_Entry(entity, resolved))

        for type_id in self._visible_types(store, usage):
            add("types", names.namespace_of(type_id), type_id, names.resolve(type_id, scope))

        graph = store.graph
        for client in topology.walk():
            # A combined client merges same-named groups of different services
            owner = f"{client.parent}@{self._service_of_client(graph, client)}"
            add("clients", owner, client.id, self._client_name(names, client, scope))
            for op_id in client.operations:
                add("operations", client.id, op_id, names.resolve(op_id, scope))

        if store.config.check_members:
            for type_id in self._visible_types(store, usage):
                node = store.graph.types[type_id]
                for member in (*node.properties, *node.members):
                    resolved = names.resolve_member(type_id, member.name, scope)
                    add("members", type_id, member_id(type_id, member.name), resolved)

        return buckets

    @staticmethod
    def _client_name(names: NameTable, client: ClientNode, scope: str) -> ResolvedName:
        if client.source is not None:
            return names.resolve(client.source, scope)
        # Created from a bare string target: the string is the declared name
        return ResolvedName(client.name, NameSource.DECLARED)

    @staticmethod
    def _service_of_client(graph: ServiceGraph, client: ClientNode) -> Optional[str]:
        source = client.source
        if source is None or (source not in graph.namespaces and source not in graph.interfaces):
            return None
        return graph.service_of(graph.namespace_of_container(source))

    @staticmethod
    def _visible_types(store: ResolutionStore, usage: UsageTable) -> Iterator[str]:
        for node in store.graph.types.values():
            if node.kind in DECLARABLE_KINDS and is_visible(usage, node.id):
                yield node.id

    def _flattened_collisions(
        self, store: ResolutionStore, usage: UsageTable, names: NameTable, scope: str
    ) -> list[str]:
        """First entity of every namespace group beyond the first, per colliding name."""
        by_name: dict[str, dict[Optional[str], list[str]]] = {}
        for type_id in self._visible_types(store, usage):
            groups = by_name.setdefault(names.name(type_id, scope), {})
            groups.setdefault(names.namespace_of(type_id), []).append(type_id)

        offenders: list[str] = []
        for groups in by_name.values():
            if len(groups) < 2:
                continue
            for members in list(groups.values())[1:]:
                offenders.append(members[0])
        return offenders

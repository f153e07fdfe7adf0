"""Usage classification: which roles does each type play on the emitted surface.

Walks every emitted operation and tags the types it reaches:

    request body / parameters   INPUT
    responses                   OUTPUT
    error responses             EXCEPTION
    long-running initial model  LRO_INITIAL (envelope only) + OUTPUT
    multipart request body      MULTIPART_FORM_DATA (envelope only) + INPUT
    merge-patch request body    JSON_MERGE_PATCH (envelope only) + INPUT

The ``@versioned`` enum of every service gets API_VERSION_ENUM. Anything
not reached keeps NONE and is invisible to the rules.
"""

from __future__ import annotations

from enum import IntFlag
from typing import Iterator, Mapping, Optional

from ...graph.models import ServiceGraph
from ...logging_config import get_logger
from ..store import ResolutionStore

logger = get_logger(__name__)


class UsageFlags(IntFlag):
    NONE = 0
    INPUT = 1 << 1
    OUTPUT = 1 << 2
    API_VERSION_ENUM = 1 << 3
    JSON_MERGE_PATCH = 1 << 4
    MULTIPART_FORM_DATA = 1 << 5
    EXCEPTION = 1 << 10
    LRO_INITIAL = 1 << 11


# Roles that belong to the envelope type itself and do not flow into its members.
ENVELOPE_ONLY = UsageFlags.LRO_INITIAL | UsageFlags.MULTIPART_FORM_DATA | UsageFlags.JSON_MERGE_PATCH


class UsageTable:
    """Read-only view over the computed flags. Unknown ids read as NONE."""

    def __init__(self, flags: Mapping[str, UsageFlags]):
        self._flags = dict(flags)

    def __getitem__(self, type_id: str) -> UsageFlags:
        return self._flags.get(type_id, UsageFlags.NONE)

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._flags

    def __len__(self) -> int:
        return len(self._flags)

    def items(self) -> Iterator[tuple[str, UsageFlags]]:
        return iter(self._flags.items())

    def is_used(self, type_id: str) -> bool:
        return self[type_id] != UsageFlags.NONE

    def has(self, type_id: str, flag: UsageFlags) -> bool:
        return bool(self[type_id] & flag)


def emitted_operations(graph: ServiceGraph) -> list[str]:
    """Operations that live under some service and therefore reach a client."""
    return [
        op.id
        for op in graph.operations.values()
        if graph.service_of(graph.namespace_of_container(op.container)) is not None
    ]


class UsageClassifier:
    """Populates store.usage from the emitted operations."""

    name = "usage"
    requires = frozenset({"graph"})
    provides = frozenset({"usage"})
    error_mode = "fail"

    def analyze(self, store: ResolutionStore) -> None:
        flags = classify_usage(store.graph)
        store.usage.set(UsageTable(flags), produced_by=self.name)
        used = sum(1 for f in flags.values() if f != UsageFlags.NONE)
        logger.debug(f"Usage: {used}/{len(store.graph.types)} types reachable")


def classify_usage(
    graph: ServiceGraph, operations: Optional[list[str]] = None
) -> dict[str, UsageFlags]:
    """Compute usage flags for every type in ``graph``.

    Args:
        graph: The service graph
        operations: Emitted operation ids; defaults to emitted_operations(graph)

    Returns:
        Dict of type id -> flags, with an entry for every type
    """
    flags: dict[str, UsageFlags] = {type_id: UsageFlags.NONE for type_id in graph.types}

    def mark(type_id: Optional[str], usage: UsageFlags) -> None:
        if type_id is None:
            return
        flags[type_id] |= usage
        propagate = usage & ~ENVELOPE_ONLY
        if propagate:
            _spread(graph, flags, type_id, propagate)

    for op_id in operations if operations is not None else emitted_operations(graph):
        op = graph.operations[op_id]
        body_usage = UsageFlags.INPUT
        if op.multipart:
            body_usage |= UsageFlags.MULTIPART_FORM_DATA
        if op.merge_patch:
            body_usage |= UsageFlags.JSON_MERGE_PATCH
        mark(op.body, body_usage)
        for param in op.parameters:
            mark(param.type_id, UsageFlags.INPUT)
        for response in op.responses:
            mark(response, UsageFlags.OUTPUT)
        for error in op.errors:
            mark(error, UsageFlags.EXCEPTION)
        mark(op.lro_initial, UsageFlags.LRO_INITIAL | UsageFlags.OUTPUT)

    for ns in graph.services():
        if ns.versioned_by is not None:
            flags[ns.versioned_by] |= UsageFlags.API_VERSION_ENUM

    return flags


def _spread(
    graph: ServiceGraph, flags: dict[str, UsageFlags], root: str, usage: UsageFlags
) -> None:
    """Push ``usage`` from ``root`` into everything it structurally contains."""
    stack = [ref for ref in _members(graph, root)]
    while stack:
        type_id = stack.pop()
        if flags[type_id] & usage == usage:
            continue  # already carries these roles, so does its subtree
        flags[type_id] |= usage
        stack.extend(_members(graph, type_id))


def _members(graph: ServiceGraph, type_id: str) -> Iterator[str]:
    node = graph.types[type_id]
    for prop in node.properties:
        yield prop.type_id
    yield from node.variants
    if node.inner is not None:
        yield node.inner
    if node.base is not None:
        yield node.base

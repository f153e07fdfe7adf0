"""Order analyzers by their requires/provides declarations.

Uses graphlib.TopologicalSorter. Wiring mistakes (two passes claiming one
slot, a requirement cycle) surface when the kernel is constructed, before
any graph is touched.
"""

from __future__ import annotations

from graphlib import CycleError, TopologicalSorter
from typing import Any

from ..exceptions import PassCycleError, SlotCollisionError


def resolve_pass_order(analyzers: list[Any]) -> list[Any]:
    """Topologically sort analyzers so that providers run before consumers.

    Ties keep the order the analyzers were given in.

    Raises:
        SlotCollisionError: If two analyzers provide the same slot
        PassCycleError: If there's a dependency cycle
    """
    if not analyzers:
        return []

    provider_of: dict[str, str] = {}
    for analyzer in analyzers:
        for slot in sorted(analyzer.provides):
            if slot in provider_of:
                raise SlotCollisionError(slot, provider_of[slot], analyzer.name)
            provider_of[slot] = analyzer.name

    by_name = {analyzer.name: analyzer for analyzer in analyzers}
    ts: TopologicalSorter[str] = TopologicalSorter()
    for analyzer in analyzers:
        # Requirements nobody provides are external (e.g. "graph") and checked at run time
        providers = [provider_of[r] for r in sorted(analyzer.requires) if r in provider_of]
        ts.add(analyzer.name, *providers)

    try:
        ts.prepare()
    except CycleError as e:
        raise PassCycleError(f"Pass dependency cycle detected: {e.args[1]}") from e

    position = {analyzer.name: i for i, analyzer in enumerate(analyzers)}
    ordered: list[Any] = []
    while ts.is_active():
        ready = sorted(ts.get_ready(), key=position.__getitem__)
        for name in ready:
            ordered.append(by_name[name])
            ts.done(name)
    return ordered

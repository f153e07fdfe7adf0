"""Load a ServiceGraph from its JSON description.

The document mirrors the builder API. Nodes refer to each other by id, and
ids default to the builder's naming convention, so a document only needs
explicit ``id`` fields where two declarations would otherwise clash.

    {
      "namespaces": [{"name": "MyService", "service": true}],
      "types": [
        {"kind": "builtin", "name": "string"},
        {"kind": "model", "name": "Foo", "namespace": "MyService",
         "properties": {"a": "string"}}
      ],
      "operations": [{"name": "getFoo", "container": "MyService",
                      "responses": ["MyService.Foo"]}]
    }

Declaration order matters only for determinism; forward references are
resolved by build() validation, not at load time.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from ..exceptions import InvalidGraphError
from .builder import GraphBuilder
from .models import ALL_SCOPES, Relocation, ServiceGraph, TypeKind


def load_graph(path: Path) -> ServiceGraph:
    """Read and build the graph stored at ``path``.

    Raises:
        InvalidGraphError: If the file is not valid JSON or not a graph document
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise InvalidGraphError(f"cannot read {path}: {e}")
    except json.JSONDecodeError as e:
        raise InvalidGraphError(f"{path} is not valid JSON: {e}")
    return graph_from_dict(data)


def graph_from_dict(data: Mapping[str, Any]) -> ServiceGraph:
    if not isinstance(data, Mapping):
        raise InvalidGraphError("graph document must be a JSON object")

    builder = GraphBuilder()
    try:
        for entry in data.get("namespaces", []):
            builder.namespace(
                entry["name"],
                entry.get("parent"),
                service=bool(entry.get("service", False)),
                versioned_by=entry.get("versionedBy"),
                overrides=entry.get("overrides"),
                id=entry.get("id"),
            )
        for entry in data.get("interfaces", []):
            builder.interface(
                entry["name"],
                entry["namespace"],
                overrides=entry.get("overrides"),
                id=entry.get("id"),
            )
        for entry in data.get("types", []):
            _load_type(builder, entry)
        for entry in data.get("operations", []):
            builder.operation(
                entry["name"],
                entry["container"],
                body=entry.get("body"),
                parameters=_properties(entry.get("parameters")),
                responses=entry.get("responses", ()),
                errors=entry.get("errors", ()),
                lro_initial=entry.get("lroInitial"),
                multipart=bool(entry.get("multipart", False)),
                merge_patch=bool(entry.get("mergePatch", False)),
                overrides=entry.get("overrides"),
                relocations=[_relocation(r) for r in entry.get("clientLocation", [])],
                id=entry.get("id"),
            )
        for entry in data.get("clients", []):
            builder.client(
                entry["name"],
                entry["services"],
                overrides=entry.get("overrides"),
                id=entry.get("id"),
            )
    except KeyError as e:
        raise InvalidGraphError(f"missing required field {e}")
    except (TypeError, AttributeError) as e:
        raise InvalidGraphError(f"malformed entry: {e}")

    return builder.build()


def _load_type(builder: GraphBuilder, entry: Mapping[str, Any]) -> str:
    try:
        kind = TypeKind(entry["kind"])
    except ValueError:
        raise InvalidGraphError(f"unknown type kind '{entry['kind']}'", node_id=entry.get("id"))

    if kind == TypeKind.BUILTIN:
        return builder.builtin(entry["name"])
    if kind == TypeKind.CONSTANT:
        return builder.constant(entry["value"])
    if kind == TypeKind.NULLABLE:
        return builder.nullable(entry["inner"], id=entry.get("id"))

    common = dict(
        name=entry.get("name"),
        namespace=entry.get("namespace"),
        overrides=entry.get("overrides"),
        id=entry.get("id"),
    )
    if kind == TypeKind.MODEL:
        return builder.model(
            properties=_properties(entry.get("properties")),
            template_args=entry.get("templateArgs", ()),
            base=entry.get("base"),
            **common,
        )
    if kind == TypeKind.ENUM:
        return builder.enum(members=_members(entry.get("members")), **common)
    return builder.union(
        variants=entry.get("variants", ()),
        template_args=entry.get("templateArgs", ()),
        **common,
    )


def _properties(raw: Any) -> dict[str, Any]:
    """Properties are {name: type_id} or {name: {"type": id, "overrides": {...}}}."""
    if not raw:
        return {}
    result: dict[str, Any] = {}
    for name, spec in raw.items():
        if isinstance(spec, Mapping):
            result[name] = (spec["type"], spec.get("overrides"))
        else:
            result[name] = spec
    return result


def _members(raw: Any) -> list[Any]:
    if not raw:
        return []
    result: list[Any] = []
    for spec in raw:
        if isinstance(spec, Mapping):
            result.append((spec["name"], spec.get("overrides")))
        else:
            result.append(spec)
    return result


def _relocation(raw: Mapping[str, Any]) -> Relocation:
    """``{"client": id}`` targets an existing node, ``{"name": str}`` a client by name."""
    scope = raw.get("scope", ALL_SCOPES)
    if "client" in raw:
        return GraphBuilder.move_to(raw["client"], scope)
    if "name" in raw:
        return GraphBuilder.move_to_named(raw["name"], scope)
    raise InvalidGraphError("clientLocation needs either 'client' or 'name'")

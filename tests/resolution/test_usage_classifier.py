"""Tests for usage classification."""

from sdk_namecheck.resolution.analyzers.usage import (
    UsageFlags,
    UsageTable,
    classify_usage,
    emitted_operations,
)


class TestRoles:
    """Each operation slot tags the types it reaches."""

    def test_body_response_error(self, builder):
        svc = builder.service("S")
        req = builder.model("Req", svc)
        resp = builder.model("Resp", svc)
        err = builder.model("Err", svc)
        builder.operation("op", svc, body=req, responses=[resp], errors=[err])
        flags = classify_usage(builder.build())
        assert flags[req] == UsageFlags.INPUT
        assert flags[resp] == UsageFlags.OUTPUT
        assert flags[err] == UsageFlags.EXCEPTION

    def test_parameters_are_input(self, builder):
        svc = builder.service("S")
        status = builder.enum("Status", svc, members=["active"])
        builder.operation("op", svc, parameters={"status": status})
        flags = classify_usage(builder.build())
        assert flags[status] == UsageFlags.INPUT

    def test_roles_accumulate(self, builder):
        svc = builder.service("S")
        foo = builder.model("Foo", svc)
        builder.operation("put", svc, body=foo, responses=[foo])
        flags = classify_usage(builder.build())
        assert flags[foo] == UsageFlags.INPUT | UsageFlags.OUTPUT

    def test_unreachable_type_is_none(self, builder):
        svc = builder.service("S")
        orphan = builder.model("Orphan", svc)
        flags = classify_usage(builder.build())
        assert flags[orphan] == UsageFlags.NONE


class TestPropagation:
    """Roles flow into everything a type structurally contains."""

    def test_properties_variants_and_base(self, builder):
        svc = builder.service("S")
        leaf = builder.model("Leaf", svc)
        inline = builder.union(variants=[leaf, builder.builtin("string")])
        base = builder.model("Base", svc)
        top = builder.model("Top", svc, properties={"x": inline}, base=base)
        builder.operation("get", svc, responses=[top])
        flags = classify_usage(builder.build())
        assert flags[inline] == UsageFlags.OUTPUT
        assert flags[leaf] == UsageFlags.OUTPUT
        assert flags[base] == UsageFlags.OUTPUT

    def test_nullable_inner(self, builder):
        svc = builder.service("S")
        foo = builder.model("Foo", svc)
        builder.operation("get", svc, responses=[builder.nullable(foo)])
        flags = classify_usage(builder.build())
        assert flags[foo] == UsageFlags.OUTPUT

    def test_recursive_model_terminates(self, builder):
        svc = builder.service("S")
        node = builder.model("Node", svc, properties={"next": "S.Node"})
        builder.operation("get", svc, responses=[node])
        flags = classify_usage(builder.build())
        assert flags[node] == UsageFlags.OUTPUT


class TestEnvelopeRoles:
    """LroInitial, MultipartFormData and JsonMergePatch tag only the envelope."""

    def test_lro_initial(self, builder):
        svc = builder.service("S")
        inner = builder.model("Status", svc)
        envelope = builder.model(properties={"status": inner})
        builder.operation("start", svc, lro_initial=envelope)
        flags = classify_usage(builder.build())
        assert flags[envelope] == UsageFlags.LRO_INITIAL | UsageFlags.OUTPUT
        assert flags[inner] == UsageFlags.OUTPUT

    def test_multipart_body(self, builder):
        svc = builder.service("S")
        part = builder.model("Part", svc)
        form = builder.model(properties={"file": part})
        builder.operation("upload", svc, body=form, multipart=True)
        flags = classify_usage(builder.build())
        assert flags[form] == UsageFlags.INPUT | UsageFlags.MULTIPART_FORM_DATA
        assert flags[part] == UsageFlags.INPUT

    def test_merge_patch_body(self, builder):
        svc = builder.service("S")
        patch = builder.model("Patch", svc)
        builder.operation("update", svc, body=patch, merge_patch=True)
        flags = classify_usage(builder.build())
        assert flags[patch] & UsageFlags.JSON_MERGE_PATCH


class TestVersioning:
    """The service's @versioned enum is an ApiVersionEnum."""

    def test_api_version_enum(self, builder):
        svc = builder.service("S")
        versions = builder.enum("Versions", svc, members=["v1"])
        builder.versioned(svc, versions)
        flags = classify_usage(builder.build())
        assert flags[versions] == UsageFlags.API_VERSION_ENUM


class TestEmittedOperations:
    """Only operations under a service reach a client."""

    def test_operations_outside_services_are_ignored(self, builder):
        svc = builder.service("S")
        lib = builder.namespace("Lib")
        foo = builder.model("Foo", lib)
        builder.operation("helper", lib, responses=[foo])
        builder.operation("ping", svc)
        graph = builder.build()
        assert emitted_operations(graph) == ["S.ping"]
        assert classify_usage(graph)[foo] == UsageFlags.NONE


class TestUsageTable:
    """Read-only view semantics."""

    def test_unknown_ids_read_as_none(self):
        table = UsageTable({"a": UsageFlags.INPUT})
        assert table["missing"] == UsageFlags.NONE
        assert table.is_used("a")
        assert not table.is_used("missing")
        assert table.has("a", UsageFlags.INPUT | UsageFlags.OUTPUT)
        assert "a" in table
        assert len(table) == 1

"""Tests for GraphBuilder id assignment and build() validation."""

import pytest

from sdk_namecheck.exceptions import InvalidGraphError, UnknownNodeError
from sdk_namecheck.graph import ALL_SCOPES, GraphBuilder, ScopedNames, TypeKind


class TestIds:
    """Ids follow the qualified declaration name."""

    def test_namespace_and_type_ids(self, builder):
        svc = builder.service("MyService")
        sub = builder.namespace("SubA", svc)
        foo = builder.model("Foo", sub)
        assert svc == "MyService"
        assert sub == "MyService.SubA"
        assert foo == "MyService.SubA.Foo"

    def test_template_instance_id(self, builder):
        svc = builder.service("MyService")
        int32 = builder.builtin("int32")
        response = builder.model("Response", svc, template_args=[int32])
        assert response == "MyService.Response<int32>"

    def test_anonymous_counter_is_shared_across_kinds(self, builder):
        first = builder.union(variants=[builder.builtin("string")])
        second = builder.model(properties={})
        assert first == "union#1"
        assert second == "model#2"

    def test_builtins_are_shared(self, builder):
        assert builder.builtin("string") == builder.builtin("string")
        graph = builder.build()
        assert len(graph.types) == 1
        assert graph.types["string"].kind == TypeKind.BUILTIN

    def test_nullables_are_shared_per_inner_type(self, builder):
        svc = builder.service("S")
        foo = builder.model("Foo", svc)
        assert builder.nullable(foo) == builder.nullable(foo) == "S.Foo?"

    def test_operation_and_client_ids(self, builder):
        svc = builder.service("S")
        iface = builder.interface("Widgets", svc)
        assert builder.operation("list", iface) == "S.Widgets.list"
        assert builder.client("Combined", [svc]) == "client:Combined"

    def test_duplicate_id_rejected(self, builder):
        svc = builder.service("S")
        builder.model("Foo", svc)
        with pytest.raises(InvalidGraphError) as exc_info:
            builder.model("Foo", svc)
        assert exc_info.value.node_id == "S.Foo"

    def test_explicit_id_wins(self, builder):
        svc = builder.service("S")
        assert builder.model("Foo", svc, id="custom") == "custom"


class TestValidation:
    """build() checks every cross reference."""

    def test_dangling_property_type(self, builder):
        svc = builder.service("S")
        builder.model("Foo", svc, properties={"a": "Missing"})
        with pytest.raises(UnknownNodeError) as exc_info:
            builder.build()
        assert exc_info.value.node_id == "Missing"
        assert exc_info.value.referenced_by == "S.Foo"

    def test_dangling_operation_container(self, builder):
        builder.operation("get", "Nowhere")
        with pytest.raises(UnknownNodeError):
            builder.build()

    def test_versioned_by_must_be_enum(self, builder):
        svc = builder.service("S")
        foo = builder.model("Foo", svc)
        builder.versioned(svc, foo)
        with pytest.raises(InvalidGraphError, match="versioned_by"):
            builder.build()

    def test_client_needs_service_namespaces(self, builder):
        svc = builder.service("S")
        plain = builder.namespace("Plain", svc)
        builder.client("C", [plain])
        with pytest.raises(InvalidGraphError, match="not a service"):
            builder.build()

    def test_client_needs_at_least_one_service(self, builder):
        builder.client("C", [])
        with pytest.raises(InvalidGraphError):
            builder.build()

    def test_relocation_to_unknown_container(self, builder):
        svc = builder.service("S")
        builder.operation("a", svc, relocations=[GraphBuilder.move_to("S.Missing")])
        with pytest.raises(UnknownNodeError):
            builder.build()

    def test_relocation_with_empty_name(self, builder):
        svc = builder.service("S")
        builder.operation("a", svc, relocations=[GraphBuilder.move_to_named("")])
        with pytest.raises(InvalidGraphError, match="target name"):
            builder.build()

    def test_relocation_with_empty_scope(self, builder):
        svc = builder.service("S")
        builder.operation("a", svc, relocations=[GraphBuilder.move_to_named("X", scope="")])
        with pytest.raises(InvalidGraphError, match="scope"):
            builder.build()


class TestScopedNames:
    """Override maps: specific scope first, then AllScopes."""

    def test_specific_scope_wins(self):
        names = ScopedNames.of({ALL_SCOPES: "Shared", "python": "PyName"})
        assert names.lookup("python") == ("PyName", "python")

    def test_falls_back_to_all_scopes(self):
        names = ScopedNames.of({ALL_SCOPES: "Shared", "python": "PyName"})
        assert names.lookup("go") == ("Shared", ALL_SCOPES)

    def test_all_scopes_view_ignores_language_entries(self):
        names = ScopedNames.of({"python": "PyName"})
        assert names.lookup(ALL_SCOPES) is None

    def test_empty(self):
        names = ScopedNames.of(None)
        assert not names
        assert names.lookup("python") is None
        assert names.scopes() == set()

    def test_bare_string_override_means_all_scopes(self, builder):
        svc = builder.service("S")
        foo = builder.model("Foo", svc, overrides="Bar")
        graph = builder.build()
        assert graph.types[foo].overrides.lookup("csharp") == ("Bar", ALL_SCOPES)


class TestServiceGraphHelpers:
    """Navigation helpers on the frozen graph."""

    def test_namespace_path_and_service(self, builder):
        svc = builder.service("Contoso")
        mgr = builder.namespace("WidgetManager", svc)
        sub = builder.namespace("Sub", mgr)
        graph = builder.build()
        assert graph.namespace_path(sub) == ("Contoso", "WidgetManager", "Sub")
        assert graph.service_of(sub) == svc
        assert graph.child_namespaces(svc)[0].id == mgr

    def test_namespace_outside_service(self, builder):
        lib = builder.namespace("Lib")
        graph = builder.build()
        assert graph.service_of(lib) is None

    def test_relocation_for_prefers_exact_scope(self, builder):
        svc = builder.service("S")
        a = builder.interface("A", svc)
        b = builder.interface("B", svc)
        op = builder.operation(
            "x",
            svc,
            relocations=[GraphBuilder.move_to(a, "go"), GraphBuilder.move_to(b)],
        )
        graph = builder.build()
        node = graph.operations[op]
        assert node.relocation_for("go").target.node_id == a
        assert node.relocation_for("python").target.node_id == b
        assert node.relocation_for(ALL_SCOPES).target.node_id == b

    def test_iter_overrides_includes_members_and_parameters(self, builder):
        svc = builder.service("S")
        string = builder.builtin("string")
        builder.model("Foo", svc, properties={"a": (string, {"go": "A"})})
        builder.enum("E", svc, members=[("x", {"java": "X"})])
        builder.operation("op", svc, parameters={"p": (string, {"rust": "P"})})
        graph = builder.build()
        scopes = set()
        for overrides in graph.iter_overrides():
            scopes |= overrides.scopes()
        assert scopes == {"go", "java", "rust"}

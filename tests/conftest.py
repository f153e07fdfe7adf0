"""Shared test fixtures for SDK Namecheck tests."""

import pytest

from sdk_namecheck.api import analyze
from sdk_namecheck.config import NamingConfig
from sdk_namecheck.graph import GraphBuilder


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    """Keep developer env vars and ./sdk-namecheck.toml out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("SDK_NAMECHECK_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def builder():
    """Fresh graph builder."""
    return GraphBuilder()


@pytest.fixture
def run():
    """Run the full pipeline: run(graph, emitter_name=..., namespace=...)."""

    def _run(graph, **settings):
        return analyze(graph, config=NamingConfig(**settings))

    return _run


@pytest.fixture
def widget_graph():
    """Contoso service: Widget with an inline status union, returned by getWidget."""
    b = GraphBuilder()
    svc = b.service("Contoso")
    status = b.union(variants=[b.constant("active"), b.constant("retired")])
    widget = b.model("Widget", svc, properties={"name": b.builtin("string"), "status": status})
    b.operation("getWidget", svc, responses=[widget])
    return b.build()


@pytest.fixture
def sub_namespace_graph():
    """MyService with SubA.Foo and SubB.Foo, each returned by its own operation."""
    b = GraphBuilder()
    svc = b.service("MyService")
    sub_a = b.namespace("SubA", svc)
    sub_b = b.namespace("SubB", svc)
    foo_a = b.model("Foo", sub_a, properties={"a": b.builtin("string")})
    foo_b = b.model("Foo", sub_b, properties={"b": b.builtin("string")})
    b.operation("getA", sub_a, responses=[foo_a])
    b.operation("getB", sub_b, responses=[foo_b])
    return b.build()

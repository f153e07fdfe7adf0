"""Tests for graphlib-based ordering of analyzers."""

import pytest

from sdk_namecheck.exceptions import PassCycleError, SlotCollisionError
from sdk_namecheck.resolution.toposort import resolve_pass_order


class MockAnalyzer:
    """Mock analyzer for testing."""

    def __init__(
        self,
        name: str,
        requires: set[str] | None = None,
        provides: set[str] | None = None,
    ):
        self.name = name
        self.requires = frozenset(requires or ())
        self.provides = frozenset(provides or ())
        self.error_mode = "fail"

    def analyze(self, store):
        pass


class TestResolvePassOrder:
    """Providers run before consumers."""

    def test_empty_list(self):
        assert resolve_pass_order([]) == []

    def test_independent_analyzers_keep_given_order(self):
        a = MockAnalyzer("a", provides={"slot_a"})
        b = MockAnalyzer("b", provides={"slot_b"})
        assert resolve_pass_order([b, a]) == [b, a]

    def test_dependent_analyzers(self):
        a = MockAnalyzer("a", requires={"graph"}, provides={"names"})
        b = MockAnalyzer("b", requires={"names"}, provides={"topology"})
        result = resolve_pass_order([b, a])  # Pass in wrong order
        assert result == [a, b]

    def test_diamond_dependency(self):
        a = MockAnalyzer("a", provides={"slot_a"})
        b = MockAnalyzer("b", requires={"slot_a"}, provides={"slot_b"})
        c = MockAnalyzer("c", requires={"slot_a"}, provides={"slot_c"})
        d = MockAnalyzer("d", requires={"slot_b", "slot_c"}, provides={"slot_d"})
        result = resolve_pass_order([d, c, b, a])
        assert result[0] == a
        assert result[-1] == d
        assert result.index(c) < result.index(b)

    def test_external_requirements_are_ignored(self):
        a = MockAnalyzer("a", requires={"graph"}, provides={"usage"})
        assert resolve_pass_order([a]) == [a]


class TestWiringErrors:
    """Mistakes in requires/provides surface before any pass runs."""

    def test_slot_collision(self):
        a = MockAnalyzer("a", provides={"names"})
        b = MockAnalyzer("b", provides={"names"})
        with pytest.raises(SlotCollisionError, match="names.*provided by both"):
            resolve_pass_order([a, b])

    def test_direct_cycle(self):
        a = MockAnalyzer("a", requires={"slot_b"}, provides={"slot_a"})
        b = MockAnalyzer("b", requires={"slot_a"}, provides={"slot_b"})
        with pytest.raises(PassCycleError, match="cycle"):
            resolve_pass_order([a, b])

    def test_indirect_cycle(self):
        a = MockAnalyzer("a", requires={"slot_c"}, provides={"slot_a"})
        b = MockAnalyzer("b", requires={"slot_a"}, provides={"slot_b"})
        c = MockAnalyzer("c", requires={"slot_b"}, provides={"slot_c"})
        with pytest.raises(PassCycleError):
            resolve_pass_order([a, b, c])

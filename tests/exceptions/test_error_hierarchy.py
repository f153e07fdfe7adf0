"""Tests for the SDK Namecheck exception hierarchy."""

from pathlib import Path

import pytest

from sdk_namecheck.exceptions import (
    ConfigFileError,
    ConfigurationError,
    GraphError,
    InvalidConfigError,
    InvalidGraphError,
    NamecheckError,
    PassCycleError,
    ResolutionError,
    SlotCollisionError,
    UnknownNodeError,
)


class TestHierarchy:
    """Every error is catchable as NamecheckError."""

    @pytest.mark.parametrize(
        "error, parent",
        [
            (UnknownNodeError("S.Foo"), GraphError),
            (InvalidGraphError("bad"), GraphError),
            (ConfigFileError(Path("x.toml"), "file not found"), ConfigurationError),
            (InvalidConfigError("namespace", "", "must not be blank"), ConfigurationError),
            (SlotCollisionError("names", "a", "b"), ResolutionError),
            (PassCycleError("cycle"), ResolutionError),
        ],
    )
    def test_parents(self, error, parent):
        assert isinstance(error, parent)
        assert isinstance(error, NamecheckError)


class TestDetails:
    """Details are carried as a dict and rendered after the message."""

    def test_unknown_node(self):
        error = UnknownNodeError("S.Missing", referenced_by="S.getFoo")
        assert error.details == {"node_id": "S.Missing", "referenced_by": "S.getFoo"}
        assert str(error) == "Unknown graph node: S.Missing (node_id=S.Missing, referenced_by=S.getFoo)"

    def test_invalid_graph_without_node(self):
        error = InvalidGraphError("graph document must be a JSON object")
        assert error.details == {"reason": "graph document must be a JSON object"}
        assert error.node_id is None

    def test_config_file(self):
        error = ConfigFileError(Path("cfg.toml"), "file not found")
        assert error.reason == "file not found"
        assert "path=cfg.toml" in str(error)

    def test_slot_collision(self):
        error = SlotCollisionError("names", "first", "second")
        assert error.slot == "names"
        assert str(error) == "Slot 'names' provided by both 'first' and 'second' (slot=names)"

    def test_plain_message(self):
        assert str(PassCycleError("cycle")) == "cycle"

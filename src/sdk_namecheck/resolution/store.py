"""ResolutionStore: typed Slot[T] blackboard for one compilation run.

Analyzers populate slots (usage, names, topology); rules only read them.
The store is created per run and dropped afterwards, so every memo table
hanging off a slot lives exactly as long as the run that produced it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Iterable, TypeVar

from ..config import DEFAULT_CONFIG, NamingConfig
from ..graph.models import ServiceGraph

if TYPE_CHECKING:
    from .analyzers.names import NameTable
    from .analyzers.topology import ClientTopology
    from .analyzers.usage import UsageTable

T = TypeVar("T")


@dataclass
class Slot(Generic[T]):
    """A typed blackboard slot. Wraps Optional with provenance and error context.

    Usage:
        if store.names.available:
            names = store.names.value
        else:
            return []

    Never access .value without checking .available first!
    """

    _value: T | None = None
    _error: str | None = None
    _produced_by: str = ""

    @property
    def available(self) -> bool:
        """True if value has been set."""
        return self._value is not None

    @property
    def value(self) -> T:
        """Get the value. Raises LookupError if not populated."""
        if self._value is None:
            if self._error:
                raise LookupError(
                    f"Slot not populated (produced_by={self._produced_by}): {self._error}"
                )
            raise LookupError("Slot not populated. Check .available before accessing .value")
        return self._value

    def get(self, default: T | None = None) -> T | None:
        return self._value if self._value is not None else default

    def set(self, value: T, produced_by: str) -> None:
        if self._value is not None:
            raise RuntimeError(
                f"Slot already populated by '{self._produced_by}', refusing write from '{produced_by}'"
            )
        self._value = value
        self._produced_by = produced_by
        self._error = None

    def set_error(self, error: str, produced_by: str) -> None:
        self._error = error
        self._produced_by = produced_by
        self._value = None

    @property
    def produced_by(self) -> str:
        return self._produced_by

    @property
    def error(self) -> str | None:
        return self._error


@dataclass
class ResolutionStore:
    """The blackboard all passes share.

    Slots:
        - usage: UsageTable, id -> UsageFlags
        - names: NameTable, (id, scope) -> resolved name (memoised)
        - topology: dict[scope, ClientTopology]
    """

    graph: ServiceGraph
    config: NamingConfig = DEFAULT_CONFIG

    usage: Slot[UsageTable] = field(default_factory=Slot)
    names: Slot[NameTable] = field(default_factory=Slot)
    topology: Slot[dict[str, ClientTopology]] = field(default_factory=Slot)

    @staticmethod
    def _slot_names() -> list[str]:
        return ["usage", "names", "topology"]

    @property
    def available(self) -> set[str]:
        """Names of populated slots. 'graph' is always present."""
        avail: set[str] = {"graph"}
        for name in self._slot_names():
            if getattr(self, name).available:
                avail.add(name)
        return avail

    def slot_status(self) -> dict[str, dict[str, Any]]:
        """Status of all slots, for debugging."""
        status = {}
        for name in self._slot_names():
            slot = getattr(self, name)
            info: dict[str, Any] = {"available": slot.available}
            if slot.produced_by:
                info["produced_by"] = slot.produced_by
            if slot.error:
                info["error"] = slot.error
            status[name] = info
        return status

    def mark_failed(self, slot_names: Iterable[str], error: str, produced_by: str) -> None:
        """Record why slots stayed empty. Names that are not store slots are ignored."""
        for name in slot_names:
            if name in self._slot_names():
                getattr(self, name).set_error(error, produced_by)

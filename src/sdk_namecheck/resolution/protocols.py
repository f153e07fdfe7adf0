"""Protocol classes for Analyzer and Rule plugins.

Analyzer Protocol:
    - name: Unique identifier
    - requires: Slots that must be in store.available
    - provides: Slots this analyzer adds to store.available
    - error_mode: "fail" | "skip"

Rule Protocol:
    - name: Unique identifier (also the diagnostic family it reports)
    - requires: Slots that must be available
    - error_mode: "fail" | "skip"
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import Diagnostic
    from .store import ResolutionStore


class Analyzer(Protocol):
    """Reads the store, computes, writes the slots declared in ``provides``."""

    name: str
    requires: frozenset[str]
    provides: frozenset[str]
    error_mode: str

    def analyze(self, store: ResolutionStore) -> None: ...


class Rule(Protocol):
    """Reads the store (NEVER writes) and returns diagnostics.

    Rules run only when every slot in ``requires`` is available.
    """

    name: str
    requires: frozenset[str]
    error_mode: str

    def check(self, store: ResolutionStore) -> list[Diagnostic]: ...

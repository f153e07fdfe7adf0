"""Data models for the resolution pipeline: diagnostics and the run result."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional

if TYPE_CHECKING:
    from .analyzers.names import NameTable
    from .analyzers.topology import ClientTopology
    from .analyzers.usage import UsageTable

DUPLICATE_CLIENT_NAME = "duplicate-client-name"
DUPLICATE_CLIENT_NAME_WARNING = "duplicate-client-name-warning"
NO_UNNAMED_TYPES = "no-unnamed-types"

MESSAGES: dict[str, dict[str, str]] = {
    DUPLICATE_CLIENT_NAME: {
        "default": 'Client name: "{name}" is duplicated in language scope: "{scope}"',
        "non_decorator": (
            'Client name: "{name}" is defined somewhere causing naming conflicts '
            'in language scope: "{scope}"'
        ),
    },
    NO_UNNAMED_TYPES: {
        "default": (
            'Anonymous {type} with generated name "{generatedName}" detected. Define this '
            "{type} separately with a proper name to improve code readability and reusability."
        ),
    },
}
MESSAGES[DUPLICATE_CLIENT_NAME_WARNING] = MESSAGES[DUPLICATE_CLIENT_NAME]


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """One advisory produced by a rule. Never mutated after creation."""

    code: str
    severity: Severity
    target: str  # id of the offending graph node
    params: Mapping[str, str]
    message_id: str = "default"

    @property
    def message(self) -> str:
        return MESSAGES[self.code][self.message_id].format(**self.params)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "severity": self.severity.value,
            "target": self.target,
            "params": dict(self.params),
            "message": self.message,
        }


@dataclass
class NamingResult:
    """Everything a downstream emitter or lint harness reads after a run."""

    names: Optional[NameTable] = None
    usage: Optional[UsageTable] = None
    topologies: dict[str, ClientTopology] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    rule_errors: dict[str, str] = field(default_factory=dict)
    slot_status: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    def by_code(self, code: str) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.code == code]

    def summary(self) -> str:
        if not self.diagnostics:
            return "No naming issues detected."
        errors = sum(1 for d in self.diagnostics if d.severity == Severity.ERROR)
        warnings = len(self.diagnostics) - errors
        parts = []
        if errors:
            parts.append(f"{errors} error(s)")
        if warnings:
            parts.append(f"{warnings} warning(s)")
        return f"Naming check: {', '.join(parts)}"

"""JSON formatter for SDK Namecheck."""

import json

from ..resolution.models import NamingResult
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render diagnostics plus the resolved name table as JSON."""

    def render(self, result: NamingResult) -> None:
        print(self.format(result))

    def format(self, result: NamingResult) -> str:
        data = {
            "diagnostics": [d.to_dict() for d in result.diagnostics],
            "names": result.names.as_dict() if result.names is not None else {},
            "rule_errors": dict(result.rule_errors),
        }
        return json.dumps(data, indent=2)

"""Quiet formatter: one line per diagnostic."""

from ..resolution.models import NamingResult
from .base import BaseFormatter


class QuietFormatter(BaseFormatter):
    """Render ``severity code target: message`` lines, nothing else."""

    def render(self, result: NamingResult) -> None:
        text = self.format(result)
        if text:
            print(text)

    def format(self, result: NamingResult) -> str:
        return "\n".join(
            f"{d.severity.value} {d.code} {d.target}: {d.message}" for d in result.diagnostics
        )

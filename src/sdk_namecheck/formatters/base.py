"""Base formatter interface for SDK Namecheck output rendering."""

from abc import ABC, abstractmethod

from ..resolution.models import NamingResult


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, result: NamingResult) -> None:
        """Render the result to stdout."""

    @abstractmethod
    def format(self, result: NamingResult) -> str:
        """Return formatted string representation of the result."""

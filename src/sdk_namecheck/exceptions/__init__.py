"""Exception hierarchy for SDK Namecheck."""

from .base import NamecheckError
from .config import ConfigFileError, ConfigurationError, InvalidConfigError
from .graph import GraphError, InvalidGraphError, UnknownNodeError
from .resolution import PassCycleError, ResolutionError, SlotCollisionError

__all__ = [
    "NamecheckError",
    "GraphError",
    "UnknownNodeError",
    "InvalidGraphError",
    "ConfigurationError",
    "ConfigFileError",
    "InvalidConfigError",
    "ResolutionError",
    "SlotCollisionError",
    "PassCycleError",
]

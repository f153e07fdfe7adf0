"""Pipeline wiring exceptions raised before any pass runs."""

from .base import NamecheckError


class ResolutionError(NamecheckError):
    """Base class for errors in how the resolution pipeline is assembled."""

    pass


class SlotCollisionError(ResolutionError):
    """Raised when two passes declare that they provide the same slot."""

    def __init__(self, slot: str, first: str, second: str):
        super().__init__(
            f"Slot '{slot}' provided by both '{first}' and '{second}'",
            details={"slot": slot},
        )
        self.slot = slot


class PassCycleError(ResolutionError):
    """Raised when pass requirements form a cycle."""

    pass

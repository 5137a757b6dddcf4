"""
Stellar Homestead — Errors
Modeled failure conditions raised by the core.
"""


class HomesteadError(Exception):
    """Base class for every modeled game failure."""


class InsufficientResourceError(HomesteadError):
    """A debit would drive a resource below zero."""

    def __init__(self, kind, required: int = 0, available: int = 0):
        self.kind = kind
        self.required = required
        self.available = available
        label = getattr(kind, "name", str(kind))
        super().__init__(f"Insufficient {label}: need {required}, have {available}")


class UnknownResourceKindError(HomesteadError, KeyError):
    """A resource kind is not recognized, or is absent from a ledger."""

    def __init__(self, kind):
        self.kind = kind
        label = getattr(kind, "name", kind)
        super().__init__(f"Unknown resource type: {label}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class ColonistIncapacitatedError(HomesteadError):
    """A colonist is too sick to work."""

    def __init__(self, name: str, health: int):
        self.name = name
        self.health = health
        super().__init__(f"{name} is too sick to work (health {health})")


class ColonistDeceasedError(HomesteadError):
    """A colonist's health reached zero."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} has died")


class InvalidIndexError(HomesteadError, IndexError):
    """A management command referenced a roster slot that does not exist."""

    def __init__(self, index: int, size: int, what: str = "colonist"):
        self.index = index
        self.size = size
        self.what = what
        super().__init__(f"No {what} at index {index} (have {size})")


class SaveFileError(HomesteadError):
    """A save file could not be read or has an unsupported layout."""

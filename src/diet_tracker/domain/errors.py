"""Exception hierarchy for the diet tracker."""


class DietTrackerError(Exception):
    """Base class for errors surfaced to API callers."""


class ValidationError(DietTrackerError):
    """Input was rejected before any external call."""


class NotFoundError(DietTrackerError):
    """A user record or external item does not exist."""


class ConflictError(DietTrackerError):
    """The requested change conflicts with stored state."""


class EntryNotPendingError(ConflictError):
    """The meal id is no longer in its pending set."""

    def __init__(self, kind: str, entry_id: str) -> None:
        super().__init__(f"{kind} meal {entry_id} is not pending")
        self.kind = kind
        self.entry_id = entry_id

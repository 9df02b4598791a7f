"""Error kinds raised by the lead ownership core.

Each error carries a ``kind`` string. The HTTP layer maps kinds to status
codes (forbidden -> 403, not_found -> 404, invalid_reference and
invalid_status -> 400, conflict -> 409). Bulk results may also report
``database_error`` (-> 503) for an item whose transaction failed in the
database layer.
"""

DATABASE_ERROR = "database_error"


class LeadHunterError(Exception):
    """Base class for all core errors."""
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ForbiddenError(LeadHunterError):
    """The acting user lacks the required capability."""
    kind = "forbidden"

    def __init__(self, message: str, capability: str = None):
        super().__init__(message)
        self.capability = capability


class NotFoundError(LeadHunterError):
    """A lead, user or access group id does not resolve."""
    kind = "not_found"


class InvalidReferenceError(LeadHunterError):
    """A referenced user id (e.g. the new responsible) does not exist."""
    kind = "invalid_reference"


class InvalidStatusError(LeadHunterError):
    """A new pipeline status is outside the enumerated set."""
    kind = "invalid_status"


class ConflictError(LeadHunterError):
    """A unique name is already taken."""
    kind = "conflict"

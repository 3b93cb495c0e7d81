"""
Exceptions raised by the work-log store, directory and view resolver.

The aggregator and filter engine never raise on well-formed input; these
types cover the boundary operations that reference ids or check roles.
"""


class WorklogError(Exception):
    """Base class for all work-log errors."""


class NotFound(WorklogError, LookupError):
    """
    Raised when a referenced log, task, team or user id does not exist.
    """

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind.capitalize()} not found: {identifier}")


class ValidationError(WorklogError, ValueError):
    """
    Raised when submitted data is missing a required field or is malformed.

    `field` names the offending attribute when one can be pinned down.
    """

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class Unauthorized(WorklogError):
    """Raised when the actor's role or team does not permit the requested scope."""

"""
Engine Errors

Missing obligations and malformed years are recovered locally and have no
exception type. Everything here is raised to the caller.
"""


class QueryError(RuntimeError):
    """A session or payment lookup against the record store failed."""

    def __init__(self, message: str, user_id: str | None = None):
        super().__init__(message)
        self.user_id = user_id


class InvalidSessionAssignment(ValueError):
    """A session's start time does not fall inside its year's date range."""

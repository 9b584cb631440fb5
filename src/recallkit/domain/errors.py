"""Exception hierarchy for recallkit."""


class RecallError(Exception):
    """Base class for every error raised by recallkit."""


class InvalidGradeError(RecallError, ValueError):
    """A grade outside the closed range 0..5 (or not an integer)."""

    def __init__(self, grade: object):
        self.grade = grade
        super().__init__(f"Grade must be an integer between 0 and 5, got {grade!r}")


class InvalidDailyLimitError(RecallError, ValueError):
    """A daily new-item limit that is negative or not an integer."""

    def __init__(self, limit: object):
        self.limit = limit
        super().__init__(f"Daily new limit must be a non-negative integer, got {limit!r}")


class CatalogError(RecallError):
    """The vocabulary catalog could not be loaded or is malformed."""


class PersistenceError(RecallError):
    """The snapshot could not be written to durable storage."""

"""
Binder error taxonomy.

Services raise these; the route modules translate them to HTTP responses.
Storage exceptions are always chained (``raise ... from e``) so the original
PostgREST error stays in the traceback.
"""

from typing import Any, Optional


class BinderError(Exception):
    """Base class for all Binder engine errors."""

    retryable: bool = False

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class InvalidDirection(BinderError):
    """A decision request carried a direction other than the accepted literals."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Direction must be one of 'left', 'right', 'negative', 'positive'; got {value!r}"
        )
        self.value = value


class DeckFetchFailed(BinderError):
    """The exclusion set or the candidate query failed; no deck was produced."""

    retryable = True


class StatsFetchFailed(BinderError):
    """Decision rows for a statistics request could not be read."""

    retryable = True


class DecisionWriteFailed(BinderError):
    """The primary decision upsert failed."""

    retryable = True


class CascadeFailed(BinderError):
    """
    The saved-set upsert following a positive decision failed.

    Logged by the decision service and never raised to callers: the decision
    row stays committed.
    """

    retryable = True


class SavedSetFailed(BinderError):
    """A direct read or write of the saved set failed."""

    retryable = True


class TruncatedResult(BinderError):
    """A query that must be complete came back with fewer rows than exist."""

    def __init__(self, relation: str, returned: int, total: int) -> None:
        super().__init__(
            f"{relation} returned {returned} of {total} rows; refusing a partial result"
        )
        self.relation = relation
        self.returned = returned
        self.total = total

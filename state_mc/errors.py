"""
Exceptions raised by the state algebra and the estimator.

Both derive from builtin exception types so callers catching
TypeError / ValueError keep working.
"""


class StateMCError(Exception):
    """Base class for state_mc errors."""


class InvalidPredicate(StateMCError, TypeError):
    """A state was composed from a missing or non-predicate child, or a leaf got a non-integer bound."""


class InvalidArgument(StateMCError, ValueError):
    """A sampling or experiment parameter is out of its valid domain."""

"""Error taxonomy for metrics requests.

Store failures are not wrapped here: ``sqlite3`` errors propagate unchanged
and the app maps them to a transient-failure response.
"""


class MetricsError(Exception):
    """Base class for request-level metrics errors."""


class InvalidInputError(MetricsError, ValueError):
    """The request is malformed: unknown option value or out-of-range number."""


class NotFoundError(MetricsError, LookupError):
    """The request references an entity that does not exist."""

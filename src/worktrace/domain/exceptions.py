"""
Domain exceptions for execution-result tracking.

Every exception here signals misuse of the tracking API by the caller.
None of them are transient, so none of them should be retried.
"""


class TrackingError(Exception):
    """Base class for all result-tracking errors."""


class InvalidArgument(TrackingError, ValueError):
    """
    Raised when an operation receives malformed input.

    Examples: an empty result name, an unrecognized result type, or a
    FAILURE/ERROR transition without an error payload.
    """


class InvalidState(TrackingError):
    """
    Raised when a mutation would violate the status state machine.

    Examples: overwriting a terminal status without force, or adding a
    child to a node that has already finished.
    """

    def __init__(self, message: str, node_name: str | None = None):
        """
        Args:
            message: Human-readable error message
            node_name: Name of the result node the mutation targeted, if any
        """
        super().__init__(message)
        self.node_name = node_name


class ConfigurationError(TrackingError):
    """Raised when a configuration file is missing or invalid."""

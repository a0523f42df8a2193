"""HTTP status code classification."""

from enum import Enum


class StatusBucket(Enum):
    """Coarse classification of an HTTP status code.

    The value is the lowercase label used both as a tag value and as a
    metric-name suffix.
    """

    INFORMATIONAL = "informational"
    SUCCESS = "success"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    UNKNOWN = "unknown"

    @classmethod
    def resolve(cls, status_code: int | None) -> "StatusBucket":
        """Map a status code to its bucket.

        Codes outside 100-599, and None, fall back to UNKNOWN.

        Args:
            status_code: HTTP status code from a response or service error.

        Returns:
            The matching StatusBucket.
        """
        if status_code is None:
            return cls.UNKNOWN
        return _FAMILIES.get(status_code // 100, cls.UNKNOWN)


_FAMILIES = {
    1: StatusBucket.INFORMATIONAL,
    2: StatusBucket.SUCCESS,
    3: StatusBucket.REDIRECTION,
    4: StatusBucket.CLIENT_ERROR,
    5: StatusBucket.SERVER_ERROR,
}

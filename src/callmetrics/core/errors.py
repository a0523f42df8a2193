"""Remote-service error classification."""

from typing import Any


class ServiceError(Exception):
    """Error returned by the remote service, carrying its HTTP status code."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


def service_status_code(error: BaseException | None) -> int | None:
    """Return the remote status code carried by an error, if it has one.

    Recognized errors are ServiceError, anything exposing an integer
    ``status_code`` attribute, and errors holding a ``response`` with an
    integer ``status_code`` (e.g., httpx.HTTPStatusError). Everything else,
    including transport failures, is unclassified and yields None.

    Args:
        error: Exception raised by an attempt or call.

    Returns:
        The status code, or None for unclassified errors.
    """
    if error is None:
        return None
    status = getattr(error, "status_code", None)
    if _is_status(status):
        return status
    response: Any = getattr(error, "response", None)
    status = getattr(response, "status_code", None)
    if _is_status(status):
        return status
    return None


def _is_status(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)

"""Exception hierarchy shared by services and the HTTP layer.

Every error carries the HTTP status it should surface as; the API renders
them uniformly as ``{"error": message}``.
"""


class CityCastError(Exception):
    """Base class for errors that are reported to the caller."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(CityCastError):
    """Required input is missing or malformed."""

    status_code = 400


class NotFoundError(CityCastError):
    """Nothing matched the request."""

    status_code = 404


class ServiceNotConfiguredError(CityCastError):
    """An upstream API key or setting is missing."""

    status_code = 500


class StorageError(CityCastError):
    """Reading or writing the record store failed."""

    status_code = 500


class UpstreamServiceError(CityCastError):
    """A third-party API call failed or returned an unusable response."""

    status_code = 502

"""Error taxonomy for song analysis and sheet processing."""

from typing import Optional


class EopError(Exception):
    """Base class for every failure recorded on a job or sheet."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidUrl(EopError):
    """The submitted URL carries no recognizable song id."""


class FetchError(EopError):
    """Non-success HTTP response or network failure."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParseError(EopError):
    """The fetched page did not contain what we were looking for."""


class JobNotFound(EopError):
    """No live job (or sheet document) under the requested key."""

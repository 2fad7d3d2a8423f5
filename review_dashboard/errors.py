"""Error types raised by the review dashboard."""

from enum import Enum
from typing import Dict


class ReviewDashboardError(Exception):
    """Base class for all errors raised by the dashboard."""

    status_code = 500


class ConfigurationError(ReviewDashboardError):
    """A required setting is missing."""

    def __init__(self, variable: str):
        super().__init__(f"env::{variable} is not set")
        self.variable = variable


class RemoteErrorKind(Enum):
    NOT_FOUND = 'not_found'
    FORBIDDEN = 'forbidden'
    UNAUTHORIZED = 'unauthorized'
    OTHER = 'other'


REPOSITORY_NOT_FOUND_MESSAGE = (
    'Repository not found. Please check if the organization and repository names are correct.'
)
ACCESS_DENIED_MESSAGE = (
    'Access denied. Please ensure your token has access to the organization repository '
    'and has not hit the rate limit.'
)
INVALID_TOKEN_MESSAGE = 'Invalid token. Please check your token is correct.'


class RemoteAccessError(ReviewDashboardError):
    """A GitHub API call failed.

    Produced once at the client boundary; ``kind`` tells callers which
    user-facing condition occurred without inspecting status codes.
    """

    def __init__(self, message: str, status_code: int = 500,
                 kind: RemoteErrorKind = RemoteErrorKind.OTHER):
        super().__init__(message)
        self.message = message
        # Anything below 400 is not a meaningful error status for callers
        self.status_code = status_code if status_code >= 400 else 500
        self.kind = kind

    @classmethod
    def from_status(cls, status_code: int, message: str) -> 'RemoteAccessError':
        """Classify an HTTP error status into a remote access error.

        Args:
            status_code: HTTP status returned by the API
            message: Original error message, used for unclassified statuses

        Returns:
            RemoteAccessError with the matching kind and message
        """
        if status_code == 404:
            return cls(REPOSITORY_NOT_FOUND_MESSAGE, 404, RemoteErrorKind.NOT_FOUND)
        if status_code == 403:
            return cls(ACCESS_DENIED_MESSAGE, 403, RemoteErrorKind.FORBIDDEN)
        if status_code == 401:
            return cls(INVALID_TOKEN_MESSAGE, 401, RemoteErrorKind.UNAUTHORIZED)
        return cls(message, status_code, RemoteErrorKind.OTHER)

    def to_dict(self) -> Dict:
        return {
            'status_code': self.status_code,
            'message': self.message,
            'kind': self.kind.value,
        }

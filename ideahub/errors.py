"""Error taxonomy shared by the store, query and command layers."""
from typing import Dict, Optional


class IdeaHubError(Exception):
    """Base class for all IdeaHub errors."""


class ValidationError(IdeaHubError):
    """Client-side validation failed; carries one message per field."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(", ".join(f"{field}: {message}" for field, message in self.errors.items()))


class RemoteStoreError(IdeaHubError):
    """Raised by store and storage implementations when the backend rejects a call."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class RemoteReadError(IdeaHubError):
    """A query could not be served; no partial data is returned."""


class RemoteWriteError(IdeaHubError):
    """A command's write did not reach the remote store."""

# errors.py

class RelayError(Exception):
    """Base exception for all relay errors."""
    pass


class AuthenticationError(RelayError):
    """Raised when a webhook signature is missing or does not match."""
    pass


class ValidationError(RelayError):
    """Raised when a management call is missing required fields."""
    pass


class ConflictError(RelayError):
    """Raised when a mapping already exists for a repository and branch."""

    def __init__(self, repository: str, branch: str):
        super().__init__(f"Connection already exists for repository '{repository}' and branch '{branch}'")
        self.repository = repository
        self.branch = branch


class NotFoundError(RelayError):
    """Raised when a mapping to delete does not exist."""

    def __init__(self, repository: str, branch: str):
        super().__init__(f"Connection not found for repository '{repository}' and branch '{branch}'")
        self.repository = repository
        self.branch = branch


class RemoteError(RelayError):
    """Base class for failed calls to the document store."""

    def __init__(self, message: str, page_id: str = "", status_code: int = None):
        super().__init__(message)
        self.page_id = page_id
        self.status_code = status_code


class RemoteFetchError(RemoteError):
    """Raised when a page cannot be read from Confluence."""
    pass


class RemoteWriteError(RemoteError):
    """Raised when Confluence rejects a page update, version conflicts included."""
    pass


class GitHubError(RelayError):
    """Raised when a GitHub API call fails."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code

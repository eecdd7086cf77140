"""GitHub REST client errors."""

from __future__ import annotations


class GitHubAPIError(RuntimeError):
    """Raised when GitHub returns an error response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, method: str, path: str, status_code: int) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        message = f"GitHub {method} {path} HTTP {status_code}"
        return cls(message, status_code=status_code)

    @classmethod
    def transport_error(cls, method: str, path: str, exc: Exception) -> GitHubAPIError:
        """Return an error when the request never produced a response."""
        return cls(f"GitHub {method} {path} failed: {exc}")


class GitHubResponseShapeError(RuntimeError):
    """Raised when GitHub REST responses cannot be decoded."""

    @classmethod
    def undecodable(cls, path: str, detail: object) -> GitHubResponseShapeError:
        """Return an error for a response body that does not match its model."""
        return cls(f"GitHub response for {path} has unexpected shape: {detail}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def missing_token(cls, env_var: str) -> GitHubConfigError:
        """Return an error when no GitHub token is configured."""
        return cls(f"{env_var} is required for GitHub API")

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitHub token must be non-empty")

"""Plugin-level exceptions.

GitHub transport and response failures live in
:mod:`ubiquity_demo.github.errors`; the exceptions here describe how an
event was rejected before or during dispatch.
"""

from __future__ import annotations

__all__ = [
    "AuthorizationDeniedError",
    "InvalidPluginInputError",
    "PluginConfigError",
]


class AuthorizationDeniedError(Exception):
    """Raised when an actor may not run a privileged command.

    Attributes
    ----------
    username
        Login of the actor that was refused.
    message
        User-facing explanation, suitable for posting back to GitHub.

    """

    def __init__(self, username: str, message: str) -> None:
        """Initialize with the refused actor and a user-facing message."""
        self.username = username
        self.message = message
        super().__init__(message)

    @classmethod
    def demo_command(cls, username: str) -> AuthorizationDeniedError:
        """Return the refusal raised for an unauthorised ``/demo`` command."""
        return cls(
            username,
            "You do not have permissions to start the demo. "
            "You can set up your own instance at demo.ubq.fi",
        )


class InvalidPluginInputError(Exception):
    """Raised when kernel inputs cannot be decoded.

    Attributes
    ----------
    reason
        Human-readable description of the decoding failure.
    field
        Optional name of the input that failed validation.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialize with a validation reason and optional field name."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


class PluginConfigError(ValueError):
    """Raised when environment configuration is invalid."""

    @classmethod
    def not_a_number(cls, env_var: str, raw: str) -> PluginConfigError:
        """Return an error for a non-numeric value."""
        return cls(f"{env_var} must be a number, got: {raw!r}")

    @classmethod
    def negative(cls, env_var: str, value: float) -> PluginConfigError:
        """Return an error for a negative value."""
        return cls(f"{env_var} must not be negative, got: {value}")

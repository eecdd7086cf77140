"""Configuration for the demo plugin.

This module provides the PluginConfig dataclass which controls the GitHub
endpoint, the end-user token, the fork provisioning wait and the scripted
wallet address.

Usage
-----
Create a configuration with defaults:

>>> config = PluginConfig(user_token="ghp_example")
>>> config.fork_wait_seconds
5.0

Or load from environment variables:

>>> import os
>>> os.environ["UBQ_DEMO_USER_TOKEN"] = "ghp_example"
>>> os.environ["UBQ_DEMO_FORK_WAIT_SECONDS"] = "10"
>>> PluginConfig.from_env().fork_wait_seconds
10.0

"""

from __future__ import annotations

import dataclasses as dc
import os

from ubiquity_demo.errors import PluginConfigError
from ubiquity_demo.github import GitHubConfigError, GitHubRestConfig

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_WALLET_ADDRESS = "0xefC0e701A824943b469a694aC564Aa1efF7Ab7dd"
USER_TOKEN_ENV = "UBQ_DEMO_USER_TOKEN"


@dc.dataclass(frozen=True, slots=True)
class PluginConfig:
    """Configuration for a plugin process.

    Attributes
    ----------
    user_token
        Token of the end user the plugin acts as when forking, opening pull
        requests and posting scripted comments.
    api_url
        Base URL of the GitHub REST API.
    fork_wait_seconds
        Fixed delay between requesting a fork and using it. GitHub exposes
        no completion signal for forks; under load five seconds may not be
        enough.
    http_timeout_seconds
        Per-request timeout for GitHub calls.
    wallet_address
        Address posted with the scripted ``/wallet`` command.

    """

    user_token: str
    api_url: str = DEFAULT_API_URL
    fork_wait_seconds: float = 5.0
    http_timeout_seconds: float = 20.0
    wallet_address: str = DEFAULT_WALLET_ADDRESS

    @staticmethod
    def _parse_non_negative_float(env_var: str, default: float) -> float:
        """Read a non-negative float env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            raise PluginConfigError.not_a_number(env_var, raw) from exc
        if value < 0:
            raise PluginConfigError.negative(env_var, value)
        return value

    @classmethod
    def from_env(cls) -> PluginConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``UBQ_DEMO_USER_TOKEN``: End-user GitHub token (required).
        - ``UBQ_DEMO_GITHUB_API_URL``: GitHub REST API base URL.
        - ``UBQ_DEMO_FORK_WAIT_SECONDS``: Fork provisioning delay.
        - ``UBQ_DEMO_HTTP_TIMEOUT_SECONDS``: GitHub request timeout.
        - ``UBQ_DEMO_WALLET_ADDRESS``: Address used by the scripted
          ``/wallet`` comment.

        Raises
        ------
        GitHubConfigError
            If ``UBQ_DEMO_USER_TOKEN`` is unset or blank.
        PluginConfigError
            If a numeric variable is not a non-negative number.

        """
        user_token = os.environ.get(USER_TOKEN_ENV, "").strip()
        if not user_token:
            raise GitHubConfigError.missing_token(USER_TOKEN_ENV)

        api_url = os.environ.get("UBQ_DEMO_GITHUB_API_URL", "").strip()
        wallet_address = os.environ.get("UBQ_DEMO_WALLET_ADDRESS", "").strip()

        return cls(
            user_token=user_token,
            api_url=api_url or DEFAULT_API_URL,
            fork_wait_seconds=cls._parse_non_negative_float(
                "UBQ_DEMO_FORK_WAIT_SECONDS", 5.0
            ),
            http_timeout_seconds=cls._parse_non_negative_float(
                "UBQ_DEMO_HTTP_TIMEOUT_SECONDS", 20.0
            ),
            wallet_address=wallet_address or DEFAULT_WALLET_ADDRESS,
        )

    def github_config(self, token: str) -> GitHubRestConfig:
        """Return REST client settings for ``token`` against this API."""
        return GitHubRestConfig(
            token=token,
            api_url=self.api_url,
            timeout_s=self.http_timeout_seconds,
        )

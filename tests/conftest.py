"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from tests.helpers.demo_events import WALLET_ADDRESS
from tests.helpers.fake_github import FakeGitHubClient
from ubiquity_demo.actions import ActionCatalog, NoWait
from ubiquity_demo.dispatcher import DispatchContext
from ubiquity_demo.permissions import PermissionResolver


@pytest.fixture
def installation_client() -> FakeGitHubClient:
    """Return a fake client acting with installation authority."""
    return FakeGitHubClient(login="ubiquity-os[bot]")


@pytest.fixture
def user_client() -> FakeGitHubClient:
    """Return a fake client acting as the demo user."""
    return FakeGitHubClient(login="demo-bot")


@pytest.fixture
def dispatch_context(
    installation_client: FakeGitHubClient, user_client: FakeGitHubClient
) -> DispatchContext:
    """Build a dispatch context over both fake clients with no fork wait."""
    return DispatchContext(
        user_name=user_client.login,
        actions=ActionCatalog(
            installation_client,
            user_client,
            provisioning_wait=NoWait(),
            branch_namer=lambda: "fix/0000",
        ),
        permissions=PermissionResolver(installation_client),
        wallet_address=WALLET_ADDRESS,
    )

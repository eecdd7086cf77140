"""Behavioural coverage for the demo onboarding flow over HTTP."""

from __future__ import annotations

import typing as typ

import falcon.testing
import pytest
from pytest_bdd import given, parsers, scenario, then, when

from tests.helpers.demo_events import comment_payload, label_payload, plugin_inputs
from tests.helpers.github_transport import GitHubTransportStub, demo_user_routes
from ubiquity_demo.actions import NoWait
from ubiquity_demo.api.app import create_app
from ubiquity_demo.api.plugin.resources import PluginResourceDependencies
from ubiquity_demo.config import PluginConfig

if typ.TYPE_CHECKING:
    from falcon.testing.client import Result

_ISSUE_PATH = "/repos/0x4007/ubiquity-os-demo-x/issues/3"
_INSTALL_TOKEN = "ghs_install"
_WALLET = "0x00000000000000000000000000000000000000aa"


class DemoFlowContext(typ.TypedDict, total=False):
    """Shared mutable scenario state."""

    stub: GitHubTransportStub
    client: falcon.testing.TestClient
    response: Result


@scenario("../demo_flow.feature", "Repository owner restarts the demo")
def test_owner_restarts_demo() -> None:
    """Wrap the pytest-bdd scenario for the owner's /demo."""


@scenario("../demo_flow.feature", "Stranger is refused the demo")
def test_stranger_refused() -> None:
    """Wrap the pytest-bdd scenario for a refused /demo."""


@scenario("../demo_flow.feature", "Pricing label starts the scripted conversation")
def test_pricing_label() -> None:
    """Wrap the pytest-bdd scenario for the pricing welcome."""


@scenario("../demo_flow.feature", "Ordinary comments are ignored")
def test_ordinary_comment() -> None:
    """Wrap the pytest-bdd scenario for unmatched comments."""


@pytest.fixture
def demo_context() -> DemoFlowContext:
    """Provision a dispatch-enabled app backed by a GitHub stub."""
    stub = GitHubTransportStub(
        {
            **demo_user_routes(),
            ("PATCH", _ISSUE_PATH): (200, {"number": 3}),
            ("DELETE", f"{_ISSUE_PATH}/labels"): (200, []),
            ("POST", f"{_ISSUE_PATH}/labels"): (200, []),
            ("POST", f"{_ISSUE_PATH}/comments"): (201, {"id": 1}),
        }
    )
    dependencies = PluginResourceDependencies(
        config=PluginConfig(user_token="ghp_user", wallet_address=_WALLET),
        provisioning_wait=NoWait(),
        client_factory=stub.client_factory,
    )
    return {
        "stub": stub,
        "client": falcon.testing.TestClient(create_app(dependencies)),
    }


@given("a demo plugin runtime")
def given_runtime(demo_context: DemoFlowContext) -> None:
    """Ensure the app and stub were provisioned."""
    assert "client" in demo_context, "client should be set by fixture"


@when(parsers.parse('"{sender}" comments "{body}" on the demo issue'))
def when_comment(demo_context: DemoFlowContext, sender: str, body: str) -> None:
    """Post an issue_comment.created invocation."""
    inputs = plugin_inputs(
        "issue_comment.created",
        comment_payload(body, sender=sender),
        auth_token=_INSTALL_TOKEN,
    )
    demo_context["response"] = demo_context["client"].simulate_post("/", json=inputs)


@when(parsers.parse('the label "{label}" is applied to the demo issue'))
def when_label(demo_context: DemoFlowContext, label: str) -> None:
    """Post an issues.labeled invocation."""
    inputs = plugin_inputs(
        "issues.labeled", label_payload(label), auth_token=_INSTALL_TOKEN
    )
    demo_context["response"] = demo_context["client"].simulate_post("/", json=inputs)


@then(parsers.parse("the response status is {status:d}"))
def then_status(demo_context: DemoFlowContext, status: int) -> None:
    """Assert the HTTP response status code."""
    response = demo_context["response"]
    assert response.status_code == status, (
        f"expected status {status}, got {response.status_code}: {response.text}"
    )


@then(parsers.parse('the dispatched route is "{route}"'))
def then_route(demo_context: DemoFlowContext, route: str) -> None:
    """Assert which route handled the event."""
    assert demo_context["response"].json["route"] == route


@then("the event was ignored")
def then_ignored(demo_context: DemoFlowContext) -> None:
    """Assert no route ran and GitHub was never called."""
    assert demo_context["response"].json["status"] == "ignored"
    assert demo_context["stub"].requests == []


@then("the issue is reopened and relabelled with the installation token")
def then_relabelled(demo_context: DemoFlowContext) -> None:
    """Assert the privileged reset ran in order with installation authority."""
    assert demo_context["stub"].calls_by(_INSTALL_TOKEN) == [
        ("PATCH", _ISSUE_PATH),
        ("DELETE", f"{_ISSUE_PATH}/labels"),
        ("POST", f"{_ISSUE_PATH}/labels"),
    ]


@then("no issue was modified")
def then_unmodified(demo_context: DemoFlowContext) -> None:
    """Assert only read requests reached GitHub."""
    methods = {req.method for req in demo_context["stub"].requests}
    assert methods == {"GET"}, f"unexpected mutations: {methods}"


@then(
    parsers.parse("the user posted {count:d} comments ending with the wallet command")
)
def then_comments(demo_context: DemoFlowContext, count: int) -> None:
    """Assert the scripted comments were posted with the user token."""
    bodies = [
        req.body
        for req in demo_context["stub"].requests
        if req.path == f"{_ISSUE_PATH}/comments"
    ]
    assert len(bodies) == count
    assert bodies[-1] == {"body": f"/wallet {_WALLET}"}
    assert demo_context["stub"].calls_by(_INSTALL_TOKEN) == []

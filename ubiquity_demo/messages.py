"""Canned comment bodies posted during the scripted demo."""

from __future__ import annotations

DEMO_LABELS: tuple[str, ...] = ("Priority: 1 (Normal)", "Time: <1 Hour")

START_COMMAND = "/start"

SELF_ASSIGN_EXPLANATION = """Now I can self assign to this task!

We have a built-in command called `/start` which also does some other checks before assignment, including seeing how saturated we are with other open GitHub issues now. This ensures that contributors don't "bite off more than they can chew."

This feature is especially useful for our open source partners who want to attract talent from around the world to contribute, without having to manually assign them before starting.

When pricing is set on any GitHub Issue, they will be automatically populated in our [DevPool Directory](https://devpool.directory) making it easy for contributors to discover and join new projects."""  # noqa: E501

WALLET_INTRO = (
    "The first step is for me to register my wallet address to collect rewards."
)

_WELCOME_TEMPLATE = """Hey there @{owner}, and welcome! This interactive demo highlights how UbiquityOS streamlines development workflows. Here’s what you can expect:

- All functions are installable from our @ubiquity-os-marketplace, letting you tailor your management configurations for any organization or repository.
- We’ll walk you through key capabilities—AI-powered task matching, automated pricing calculations, and smart contract integration for payments.
- Adjust settings globally across your org or use local repo overrides. More details on repository config can be found [here](https://github.com/0x4007/ubiquity-os-demo-kljiu/blob/development/.github/.ubiquity-os.config.yml).

### Getting Started
- Try out the commands you see. Feel free to experiment with different tasks and features.
- Create a [new issue](new) at any time to reset and begin anew.
- Use `/help` if you’d like to see additional commands.

Enjoy the tour!"""  # noqa: E501, RUF001


def welcome(owner: str) -> str:
    """Return the welcome comment addressed to the repository owner."""
    return _WELCOME_TEMPLATE.format(owner=owner)


def wallet_command(address: str) -> str:
    """Return the ``/wallet`` command registering ``address``."""
    return f"/wallet {address}"

"""GitHub Actions entrypoint for ``workflow_dispatch`` invocations.

The kernel dispatches the plugin's workflow with its inputs; the workflow
runs ``python -m ubiquity_demo.action``, which reads them from the event
file GitHub Actions provides (``GITHUB_EVENT_PATH``) or from ``--inputs``.
"""

from __future__ import annotations

import argparse
import asyncio
import os
from pathlib import Path

import msgspec

from ubiquity_demo.config import PluginConfig
from ubiquity_demo.errors import (
    AuthorizationDeniedError,
    InvalidPluginInputError,
    PluginConfigError,
)
from ubiquity_demo.github import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
)
from ubiquity_demo.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_exception,
    log_info,
    log_warning,
)
from ubiquity_demo.plugin import PluginInputs, decode_plugin_inputs, run_plugin

logger = get_logger(__name__)


def _load_inputs(path: Path) -> PluginInputs:
    """Read plugin inputs from a workflow event file or a bare inputs file."""
    try:
        document = msgspec.json.decode(path.read_bytes())
    except (OSError, msgspec.DecodeError) as exc:
        raise InvalidPluginInputError(str(exc), field=str(path)) from exc
    if isinstance(document, dict) and isinstance(document.get("inputs"), dict):
        document = document["inputs"]
    if not isinstance(document, dict):
        msg = "plugin inputs must be a JSON object"
        raise InvalidPluginInputError(msg, field=str(path))
    return decode_plugin_inputs(document)


def _inputs_path(explicit: Path | None) -> Path:
    if explicit is not None:
        return explicit
    event_path = os.environ.get("GITHUB_EVENT_PATH", "").strip()
    if not event_path:
        msg = "GITHUB_EVENT_PATH is not set and --inputs was not given"
        raise InvalidPluginInputError(msg)
    return Path(event_path)


def main(argv: list[str] | None = None) -> int:
    """Run the plugin once for a dispatched workflow.

    Returns
    -------
    int
        Exit code: 0 when the event was handled or ignored, 1 on refusal,
        invalid input, configuration errors or GitHub failures.

    """
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--inputs",
        type=Path,
        default=None,
        help="JSON file with the plugin inputs (defaults to GITHUB_EVENT_PATH)",
    )
    args = parser.parse_args(argv)

    log_level_str = os.environ.get("UBQ_DEMO_LOG_LEVEL", "INFO")
    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid UBQ_DEMO_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    try:
        config = PluginConfig.from_env()
        inputs = _load_inputs(_inputs_path(args.inputs))
        route = asyncio.run(run_plugin(inputs, config))
    except AuthorizationDeniedError as exc:
        log_error(logger, "Command refused for %s: %s", exc.username, exc.message)
        return 1
    except (InvalidPluginInputError, GitHubConfigError, PluginConfigError) as exc:
        log_error(logger, "Cannot run plugin: %s", exc)
        return 1
    except (GitHubAPIError, GitHubResponseShapeError) as exc:
        log_exception(logger, f"GitHub call failed: {exc}", exc)
        return 1

    log_info(
        logger,
        "Plugin finished state_id=%s route=%s",
        inputs.state_id,
        route or "ignored",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

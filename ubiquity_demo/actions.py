"""Side-effecting operations the demo dispatcher can run.

Each action is a short sequence of GitHub calls. None of them is
transactional: when a later call fails the earlier ones stay applied, and
the caller may simply re-trigger the command.
"""

from __future__ import annotations

import asyncio
import dataclasses
import typing as typ
import uuid

from ubiquity_demo.logging import get_logger, log_debug, log_info
from ubiquity_demo.messages import DEMO_LABELS
from ubiquity_demo.models import RepositoryRef

if typ.TYPE_CHECKING:
    from ubiquity_demo.github import GitHubRepositoryClient, PullRequest
    from ubiquity_demo.models import IssueRef

__all__ = [
    "ActionCatalog",
    "FixedDelayWait",
    "NoWait",
    "ProvisioningWait",
    "fork_name",
]

logger = get_logger(__name__)

EMPTY_COMMIT_MESSAGE = "chore: empty commit"


class ProvisioningWait(typ.Protocol):
    """Strategy for waiting until an asynchronously created fork is usable."""

    async def wait(self, fork: RepositoryRef) -> None:
        """Return once ``fork`` is expected to accept git operations."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class FixedDelayWait:
    """Sleep for a fixed number of seconds.

    GitHub offers no completion signal for forks, so this is a guess; a busy
    GitHub may need longer than the delay.
    """

    seconds: float = 5.0

    async def wait(self, fork: RepositoryRef) -> None:
        """Suspend the invocation for ``seconds``."""
        log_debug(
            logger,
            "Waiting for the fork to be ready fork=%s seconds=%.1f",
            fork.slug,
            self.seconds,
        )
        await asyncio.sleep(self.seconds)


class NoWait:
    """Do not wait at all."""

    async def wait(self, fork: RepositoryRef) -> None:
        """Return immediately."""
        del fork


def fork_name(source: RepositoryRef) -> str:
    """Return the name given to a user's fork of ``source``."""
    return f"{source.name}-{source.owner}"


def _new_branch_name() -> str:
    return f"fix/{uuid.uuid4()}"


class ActionCatalog:
    """Run demo actions with the appropriate GitHub identity.

    ``installation`` acts with the authority the kernel forwarded; ``user``
    acts as the end user and is used for forks, pull requests and scripted
    comments.
    """

    def __init__(
        self,
        installation: GitHubRepositoryClient,
        user: GitHubRepositoryClient,
        *,
        provisioning_wait: ProvisioningWait | None = None,
        branch_namer: typ.Callable[[], str] = _new_branch_name,
    ) -> None:
        """Bind both GitHub clients and the fork provisioning strategy."""
        self._installation = installation
        self._user = user
        self._provisioning_wait = provisioning_wait or FixedDelayWait()
        self._branch_namer = branch_namer

    async def set_demo_labels(self, issue: IssueRef) -> None:
        """Replace every label on ``issue`` with the demo label set.

        Labels are removed before the demo set is added; if adding fails the
        issue is left without labels.
        """
        await self._installation.remove_all_labels(issue)
        await self._installation.add_labels(issue, DEMO_LABELS)

    async def reopen_issue(self, issue: IssueRef) -> None:
        """Set ``issue`` state to open."""
        await self._installation.update_issue_state(issue, "open")

    async def fork_and_open_pull_request(
        self, issue: IssueRef, username: str
    ) -> PullRequest:
        """Fork the issue's repository as ``username`` and open an empty PR.

        The pull request targets the source repository's default branch and
        resolves ``issue``.
        """
        source = issue.repository
        fork = RepositoryRef(owner=username, name=fork_name(source))

        log_info(logger, "Creating fork for user: %s", username)
        await self._user.create_fork(source, name=fork.name)
        await self._provisioning_wait.wait(fork)

        repository = await self._user.get_repository(source)
        default_branch = repository.default_branch
        log_debug(
            logger,
            "Repository data default_branch=%s repo_url=%s",
            default_branch,
            repository.html_url,
        )
        head = await self._user.get_ref(source, f"heads/{default_branch}")
        base_sha = head.object.sha

        branch = self._branch_namer()
        log_debug(
            logger,
            "Will try to create a reference owner=%s repo=%s ref=%s sha=%s",
            fork.owner,
            fork.name,
            f"refs/heads/{branch}",
            base_sha,
        )
        await self._user.create_ref(fork, f"refs/heads/{branch}", base_sha)
        commit = await self._user.get_commit(fork, base_sha)
        empty_commit = await self._user.create_commit(
            fork,
            message=EMPTY_COMMIT_MESSAGE,
            tree=commit.tree.sha,
            parents=[base_sha],
        )
        await self._user.update_ref(fork, f"heads/{branch}", empty_commit.sha)

        return await self._user.create_pull_request(
            source,
            head=f"{username}:{branch}",
            base=default_branch,
            title=branch,
            body=f"Resolves #{issue.number}",
        )

    async def merge_pull_request(
        self, repository: RepositoryRef, number: int
    ) -> None:
        """Merge pull request ``number`` with installation authority."""
        result = await self._installation.merge_pull_request(repository, number)
        log_info(
            logger,
            "Merged pull request repo=%s number=%d merged=%s sha=%s",
            repository.slug,
            number,
            result.merged,
            result.sha,
        )

    async def post_comment(self, issue: IssueRef, text: str) -> None:
        """Post ``text`` on ``issue`` as the end user."""
        await self._user.create_issue_comment(issue, text)

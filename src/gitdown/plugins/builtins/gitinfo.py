"""``gitinfo`` helper — repository metadata from the local git checkout.

``{"gitdown": "gitinfo", "name": "<key>"}`` where key is one of:

- ``branch``: current branch name
- ``name``: repository name (from ``remote.origin.url``)
- ``username``: repository owner (from ``remote.origin.url``)
- ``url``: https URL of the repository

The repository queried is ``[gitinfo] git_path`` (default: the base
directory).
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, NamedTuple

from gitdown.engine.errors import HelperError
from gitdown.infrastructure.git import run_git

if TYPE_CHECKING:
    from gitdown.engine.executor import HelperContext

logger = logging.getLogger(__name__)

# git@host:owner/repo(.git), ssh://git@host/owner/repo, https://host/owner/repo
_REMOTE_PATTERN = re.compile(
    r"^(?:[a-z+]+://)?(?:[^@/]+@)?(?P<host>[^:/]+)(?::\d+)?[:/]"
    r"(?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$"
)


class RemoteInfo(NamedTuple):
    host: str
    owner: str
    repo: str

    @property
    def url(self) -> str:
        return f"https://{self.host}/{self.owner}/{self.repo}"


def parse_remote_url(remote: str) -> RemoteInfo:
    """Split a git remote URL into host, owner and repository name.

    Examples:
        >>> parse_remote_url("git@github.com:gajus/gitdown.git")
        RemoteInfo(host='github.com', owner='gajus', repo='gitdown')
        >>> parse_remote_url("https://github.com/gajus/gitdown").url
        'https://github.com/gajus/gitdown'
    """
    match = _REMOTE_PATTERN.match(remote.strip())
    if match is None:
        msg = f'Cannot parse git remote URL ("{remote}").'
        raise HelperError(msg)
    return RemoteInfo(match["host"], match["owner"], match["repo"])


class GitInfo:
    """Queries a single repository."""

    def __init__(self, git_path: Path, *, default_branch_name: str | None = None) -> None:
        self._git_path = git_path
        self._default_branch_name = default_branch_name

    def branch(self) -> str:
        branch = run_git(self._git_path, "rev-parse", "--abbrev-ref", "HEAD")
        if branch == "HEAD":
            # Detached HEAD, as on most CI checkouts.
            if self._default_branch_name:
                return self._default_branch_name
            msg = "Cannot determine branch name of a detached HEAD."
            raise HelperError(msg)
        return branch

    def remote(self) -> RemoteInfo:
        return parse_remote_url(run_git(self._git_path, "config", "--get", "remote.origin.url"))

    def name(self) -> str:
        return self.remote().repo

    def username(self) -> str:
        return self.remote().owner

    def url(self) -> str:
        return self.remote().url


_METHODS = {
    "branch": GitInfo.branch,
    "name": GitInfo.name,
    "url": GitInfo.url,
    "username": GitInfo.username,
}


class GitinfoHelper:
    weight = 10

    def compile(self, config: dict[str, Any], context: HelperContext) -> str:
        key = config.get("name")
        if not key:
            msg = "config.name must be provided."
            raise HelperError(msg)
        method = _METHODS.get(key) if isinstance(key, str) else None
        if method is None:
            msg = f'Unexpected config.name value ("{key}").'
            raise HelperError(msg)

        if context.gitdown is not None:
            settings = context.gitdown.get_config()
            gitinfo = GitInfo(
                settings.git_path,
                default_branch_name=settings.gitinfo.default_branch_name,
            )
        else:
            gitinfo = GitInfo(context.locator.base_directory)

        logger.debug("Reading gitinfo %s", key)
        return method(gitinfo)

"""GitHub API client - data layer."""

import asyncio
from pathlib import Path

from github import Auth, Github, GithubException, GithubIntegration, UnknownObjectException

from diff_dragon.config import settings
from diff_dragon.core.exceptions import GitHubAuthError
from diff_dragon.core.logging import get_logger
from diff_dragon.services.github.schemas import ChangedFile

logger = get_logger("github.client")

# GitHub rejects check-run updates carrying more annotations than this.
MAX_CHECK_RUN_ANNOTATIONS = 50


def load_private_key() -> str:
    """Read the GitHub App private key from settings or from a PEM file."""
    if settings.github_private_key:
        return settings.github_private_key.replace("\\n", "\n")

    if settings.github_private_key_path:
        return Path(settings.github_private_key_path).read_text(encoding="utf-8")

    raise GitHubAuthError("private key not configured")


def get_installation_github(installation_id: int) -> Github:
    """Mint an installation token and return a client authenticated with it."""
    if not settings.github_app_id:
        raise GitHubAuthError("GITHUB_APP_ID not configured")

    integration = GithubIntegration(
        auth=Auth.AppAuth(int(settings.github_app_id), load_private_key()),
    )
    try:
        access_token = integration.get_access_token(installation_id).token
    except GithubException as e:
        raise GitHubAuthError(f"installation token request failed ({e.status})") from e

    return Github(auth=Auth.Token(access_token), timeout=settings.github_timeout)


async def authenticate(installation_id: int, owner: str, repo: str) -> "GitHubClient":
    """Create a client for one repository, scoped to one webhook delivery."""
    github = await asyncio.to_thread(get_installation_github, installation_id)
    logger.info(f"Authenticated installation {installation_id} for {owner}/{repo}")
    return GitHubClient(github, owner, repo)


class GitHubClient:
    """GitHub API calls for a single repository.

    Instances are created per webhook delivery and never shared between
    deliveries. PyGithub is blocking, so each call runs in a worker thread.
    """

    def __init__(self, github: Github, owner: str, repo: str) -> None:
        self.owner = owner
        self.repo = repo
        self._repository = github.get_repo(f"{owner}/{repo}", lazy=True)

    async def get_file_content(self, path: str) -> str | None:
        """Fetch a file from the default branch; None if it does not exist."""

        def _fetch() -> str | None:
            try:
                content = self._repository.get_contents(path)
            except UnknownObjectException:
                return None
            if isinstance(content, list):
                logger.warning(f"Path {path} is a directory, not a file")
                return None
            return content.decoded_content.decode("utf-8")

        return await asyncio.to_thread(_fetch)

    async def list_pr_files(self, pr_number: int) -> list[ChangedFile]:
        """List the files changed in a pull request."""

        def _fetch() -> list[ChangedFile]:
            pr = self._repository.get_pull(pr_number)
            return [
                ChangedFile(
                    filename=f.filename,
                    patch=f.patch,
                    status=f.status,
                    additions=f.additions,
                    deletions=f.deletions,
                )
                for f in pr.get_files()
            ]

        return await asyncio.to_thread(_fetch)

    async def create_issue_comment(self, pr_number: int, body: str) -> int:
        """Post a conversation comment on a pull request and return its id."""

        def _create() -> int:
            issue = self._repository.get_issue(pr_number)
            return issue.create_comment(body).id

        return await asyncio.to_thread(_create)

    async def update_issue_comment(self, pr_number: int, comment_id: int, body: str) -> None:
        def _update() -> None:
            issue = self._repository.get_issue(pr_number)
            issue.get_comment(comment_id).edit(body)

        await asyncio.to_thread(_update)

    async def create_review_comment(
        self,
        pr_number: int,
        commit_sha: str,
        path: str,
        line: int,
        body: str,
    ) -> None:
        """Post an inline review comment on a line of the new file."""

        def _create() -> None:
            pr = self._repository.get_pull(pr_number)
            commit = self._repository.get_commit(commit_sha)
            pr.create_review_comment(body=body, commit=commit, path=path, line=line, side="RIGHT")

        await asyncio.to_thread(_create)

    async def create_check_run(self, head_sha: str, name: str, title: str, summary: str) -> int:
        """Create an in-progress check run and return its id."""

        def _create() -> int:
            check_run = self._repository.create_check_run(
                name=name,
                head_sha=head_sha,
                status="in_progress",
                output={"title": title, "summary": summary},
            )
            return check_run.id

        return await asyncio.to_thread(_create)

    async def update_check_run(
        self,
        check_run_id: int,
        conclusion: str,
        title: str,
        summary: str,
        text: str | None = None,
        annotations: list[dict] | None = None,
    ) -> None:
        """Complete a check run with a conclusion and output."""
        output: dict = {"title": title, "summary": summary}
        if text:
            output["text"] = text
        if annotations:
            output["annotations"] = annotations[:MAX_CHECK_RUN_ANNOTATIONS]

        def _update() -> None:
            check_run = self._repository.get_check_run(check_run_id)
            check_run.edit(status="completed", conclusion=conclusion, output=output)

        await asyncio.to_thread(_update)

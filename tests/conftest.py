"""Shared fixtures and fakes for the test suite."""

import json

import pytest
import pytest_asyncio
from github import GithubException

from diff_dragon.core.security import sign_payload
from diff_dragon.services.github.schemas import ChangedFile
from diff_dragon.services.ledger.service import ReviewLedger

WEBHOOK_SECRET = "test-secret"
HEAD_SHA = "a1b2c3d4e5f60718293a4b5c6d7e8f9012345678"

SIMPLE_PATCH = "@@ -1,3 +1,4 @@\n import os\n+import sys\n def main():\n     pass"


def make_patch(added_lines: int) -> str:
    """Patch for a new file with the given number of added lines."""
    body = "\n".join(f"+line {i}" for i in range(1, added_lines + 1))
    return f"@@ -0,0 +1,{added_lines} @@\n{body}"


def make_payload(
    action: str = "opened",
    pr_number: int = 7,
    head_sha: str = HEAD_SHA,
    installation_id: int | None = 42,
    include_pr: bool = True,
) -> dict:
    payload = {
        "action": action,
        "repository": {"name": "widgets", "owner": {"login": "acme"}},
    }
    if include_pr:
        payload["pull_request"] = {"number": pr_number, "head": {"sha": head_sha}}
    if installation_id is not None:
        payload["installation"] = {"id": installation_id}
    return payload


def signed(payload: dict, secret: str = WEBHOOK_SECRET) -> tuple[bytes, str]:
    body = json.dumps(payload).encode()
    return body, sign_payload(body, secret)


class FakeGitHubClient:
    """In-memory stand-in for GitHubClient that records every call."""

    def __init__(
        self,
        files: list[ChangedFile] | None = None,
        config_files: dict[str, str] | None = None,
        fail_comment_indices: tuple[int, ...] = (),
        fail_check_run_create: bool = False,
        fail_comment_updates: bool = False,
    ) -> None:
        self.owner = "acme"
        self.repo = "widgets"
        self.files = files if files is not None else [ChangedFile(filename="app/main.py", patch=SIMPLE_PATCH)]
        self.config_files = config_files or {}
        self.fail_comment_indices = fail_comment_indices
        self.fail_check_run_create = fail_check_run_create
        self.fail_comment_updates = fail_comment_updates

        self.issue_comments: dict[int, str] = {}
        self.comment_history: list[tuple[int, str]] = []
        self.review_comments: list[dict] = []
        self.review_comment_attempts = 0
        self.check_runs: dict[int, dict] = {}
        self.list_files_calls = 0
        self.config_reads: list[str] = []

    async def get_file_content(self, path: str) -> str | None:
        self.config_reads.append(path)
        return self.config_files.get(path)

    async def list_pr_files(self, pr_number: int) -> list[ChangedFile]:
        self.list_files_calls += 1
        return list(self.files)

    async def create_issue_comment(self, pr_number: int, body: str) -> int:
        comment_id = 100 + len(self.issue_comments)
        self.issue_comments[comment_id] = body
        self.comment_history.append((comment_id, body))
        return comment_id

    async def update_issue_comment(self, pr_number: int, comment_id: int, body: str) -> None:
        if self.fail_comment_updates:
            raise GithubException(500, {"message": "Server Error"}, None)
        self.issue_comments[comment_id] = body
        self.comment_history.append((comment_id, body))

    async def create_review_comment(self, pr_number, commit_sha, path, line, body) -> None:
        index = self.review_comment_attempts
        self.review_comment_attempts += 1
        if index in self.fail_comment_indices:
            raise GithubException(422, {"message": "Unprocessable"}, None)
        self.review_comments.append({"path": path, "line": line, "body": body, "commit": commit_sha})

    async def create_check_run(self, head_sha: str, name: str, title: str, summary: str) -> int:
        if self.fail_check_run_create:
            raise GithubException(403, {"message": "Resource not accessible by integration"}, None)
        check_run_id = 900 + len(self.check_runs)
        self.check_runs[check_run_id] = {"name": name, "head_sha": head_sha, "status": "in_progress"}
        return check_run_id

    async def update_check_run(self, check_run_id, conclusion, title, summary, text=None, annotations=None) -> None:
        self.check_runs[check_run_id].update(
            status="completed",
            conclusion=conclusion,
            title=title,
            summary=summary,
            text=text,
            annotations=annotations or [],
        )


@pytest.fixture
def fake_client():
    return FakeGitHubClient()


@pytest_asyncio.fixture
async def ledger(tmp_path):
    ledger = ReviewLedger(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    await ledger.initialize()
    yield ledger
    await ledger.close()

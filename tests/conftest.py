"""Shared fixtures for issue branch cleaner tests."""

from typing import Dict, List, Optional

import pytest

from tools.issue_branch_cleaner.config import CleanupConfig
from tools.issue_branch_cleaner.tracker import IssueState, IssueStateKind, TokenResult


class FakeRepository:
    """In-memory stand-in for GitRepository."""

    def __init__(
        self,
        branches: List[str],
        current: Optional[str] = "master",
        remote_branches: Optional[Dict[str, List[str]]] = None,
    ):
        self.repo = None
        self.branches = list(branches)
        self.current = current
        self.remote_branches = remote_branches or {}
        self.deleted_batches: List[List[str]] = []
        self.deleted_remote: List[tuple] = []

    def list_local_branches(self) -> List[str]:
        return sorted(self.branches)

    def current_branch(self) -> Optional[str]:
        return self.current

    def delete_local_branches(self, branch_names) -> bool:
        self.deleted_batches.append(list(branch_names))
        self.branches = [b for b in self.branches if b not in branch_names]
        return True

    def list_remote_branches(self, remote_name: str) -> List[str]:
        return list(self.remote_branches.get(remote_name, []))

    def delete_remote_branch(self, remote_name: str, branch_name: str) -> bool:
        self.deleted_remote.append((remote_name, branch_name))
        return True


class FakeTracker:
    """Issue tracker answering from a dict of issue number to state."""

    def __init__(self, states: Optional[Dict[str, IssueState]] = None, token_result=None):
        self.states = states or {}
        self.token_result = token_result or TokenResult.success("minted-token")
        self.queries: List[tuple] = []
        self.token_requests: List[tuple] = []

    def create_token(self, user: str, password: str) -> TokenResult:
        self.token_requests.append((user, password))
        return self.token_result

    def get_issue_state(self, account: str, repo: str, number: str, token: str) -> IssueState:
        self.queries.append((account, repo, number, token))
        return self.states.get(number, IssueState(IssueStateKind.UNKNOWN))


class ScriptedPrompter:
    """Prompter returning canned answers in order and recording the labels."""

    def __init__(self, visible: Optional[List[str]] = None, hidden: Optional[List[str]] = None):
        self.visible = list(visible or [])
        self.hidden = list(hidden or [])
        self.labels: List[str] = []

    def prompt_visible(self, label: str) -> str:
        self.labels.append(label)
        return self.visible.pop(0)

    def prompt_hidden(self, label: str) -> str:
        self.labels.append(label)
        return self.hidden.pop(0)


CLOSED = IssueState(IssueStateKind.CLOSED)
OPEN = IssueState(IssueStateKind.OPEN, "open")


@pytest.fixture
def config():
    """Fully resolved configuration."""
    return CleanupConfig(base_account="bitly", base_repo="bitly", token="secret-token")

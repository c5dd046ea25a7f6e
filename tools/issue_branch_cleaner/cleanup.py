"""Delete branches whose GitHub issue has been closed."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from shared.cli import info, literal, success, warning
from shared.logger import get_logger

from .config import CleanupConfig
from .prompts import Prompter
from .tracker import IssueState, IssueTracker
from .vcs import VersionControl

logger = get_logger(__name__)

# Branches it is normal to run the cleanup from
HOME_BRANCHES = ("master", "bitly_master")

DEFAULT_REMOTE = "origin"

# fix_login_102 -> 102
TRAILING_ISSUE_PATTERN = re.compile(r"^.*_([0-9]+)$")
# 102_fix_login -> 102
LEADING_ISSUE_PATTERN = re.compile(r"^([0-9]+)_.*$")


def extract_issue_number(branch_name: str) -> Optional[str]:
    """
    Get the issue number encoded in a branch name.

    Trailing "_<digits>" wins over leading "<digits>_".

    Args:
        branch_name: Local branch name

    Returns:
        Issue number as a string, or None if the name carries none
    """
    for pattern in (TRAILING_ISSUE_PATTERN, LEADING_ISSUE_PATTERN):
        match = pattern.match(branch_name)
        if match:
            return match.group(1)
    return None


@dataclass
class BranchCheck:
    """Result of checking one local branch against its issue."""

    branch: str
    issue_number: Optional[str] = None
    state: Optional[IssueState] = None

    @property
    def skipped(self) -> bool:
        return self.issue_number is None

    @property
    def is_closed(self) -> bool:
        return self.state is not None and self.state.is_closed


class CleanupOutcome(Enum):
    """How a cleanup run ended."""

    CLEAN = "clean"
    ABORTED = "aborted"
    LOCAL_ONLY = "local_only"
    NO_REMOTE_BRANCHES = "no_remote_branches"
    NO_ORPHANS = "no_orphans"
    DONE = "done"


class BranchCleanup:
    """
    Branch cleanup driven by issue state.

    Attributes:
        vcs: Repository to clean
        tracker: Issue tracker holding the issues
        prompter: Source of confirmation answers
        config: Resolved run configuration
        remote: Remote whose orphaned branches may be deleted
    """

    def __init__(
        self,
        vcs: VersionControl,
        tracker: IssueTracker,
        prompter: Prompter,
        config: CleanupConfig,
        remote: str = DEFAULT_REMOTE,
    ):
        self.vcs = vcs
        self.tracker = tracker
        self.prompter = prompter
        self.config = config
        self.remote = remote

    def check_branches(self) -> List[BranchCheck]:
        """
        Look up the issue state of every local branch but the current one.

        Returns:
            One BranchCheck per branch, in branch name order
        """
        current = self.vcs.current_branch()
        if current and current not in HOME_BRANCHES:
            info("")
            warning(f"WARNING: You are currently on {current} so we can't do anything with it.")
            info(f"Skipping {current}")
            info("")

        checks = []
        for branch in self.vcs.list_local_branches():
            if branch == current:
                continue

            issue_number = extract_issue_number(branch)
            if issue_number is None:
                info(f"  Skipping {branch}")
                checks.append(BranchCheck(branch=branch))
                continue

            state = self.tracker.get_issue_state(
                self.config.base_account, self.config.base_repo, issue_number, self.config.token
            )
            check = BranchCheck(branch=branch, issue_number=issue_number, state=state)
            checks.append(check)

            if check.is_closed:
                info(f"  Checking issue {issue_number}... ==> Closed. Adding {branch} to delete list.")
            else:
                logger.debug(f"Issue {issue_number} of {branch} is {state.label}")
                info(f"  Checking issue {issue_number}... Still open. {literal(f'[{branch}]')}")

        return checks

    def find_orphan_remote_branches(self, remote_branches: List[str]) -> List[str]:
        """
        Remote branches with no local branch of the same name.

        Args:
            remote_branches: Branch names on the remote, without prefix

        Returns:
            Orphaned branch names in remote listing order
        """
        local_branches = set(self.vcs.list_local_branches())
        return [branch for branch in remote_branches if branch not in local_branches]

    def confirm(self, question: str) -> bool:
        """Ask a y/[n] question; only an exact "y" counts as yes."""
        return self.prompter.prompt_visible(f"{question} y/[n] ") == "y"

    def run(self) -> CleanupOutcome:
        """
        Run the whole cleanup.

        Returns:
            How the run ended
        """
        checks = self.check_branches()
        merged_branches = [check.branch for check in checks if check.is_closed]

        if not merged_branches:
            success("You seem to be all clean and up to date. Congrats!")
            return CleanupOutcome.CLEAN

        return self.delete_merged_branches(merged_branches)

    def delete_merged_branches(self, merged_branches: List[str]) -> CleanupOutcome:
        """Delete closed-issue branches locally, then offer the remote cleanup."""
        info(f"git branch -D {' '.join(merged_branches)}...")
        if not self.confirm("Ready?"):
            info("Aborting.")
            return CleanupOutcome.ABORTED

        self.vcs.delete_local_branches(merged_branches)

        if not self.confirm("Clean up remotes, too? "):
            return CleanupOutcome.LOCAL_ONLY

        return self.delete_orphan_remote_branches()

    def delete_orphan_remote_branches(self) -> CleanupOutcome:
        """Delete remote branches that no longer have a local branch."""
        remote_branches = self.vcs.list_remote_branches(self.remote)
        if not remote_branches:
            info("No remote branches. Quitting.")
            return CleanupOutcome.NO_REMOTE_BRANCHES

        delete_branches = self.find_orphan_remote_branches(remote_branches)
        if not delete_branches:
            info("No orphan remote branches. Quitting.")
            return CleanupOutcome.NO_ORPHANS

        for branch in delete_branches:
            info(f"DELETING {branch}")
            self.vcs.delete_remote_branch(self.remote, branch)

        success("Done.")
        return CleanupOutcome.DONE

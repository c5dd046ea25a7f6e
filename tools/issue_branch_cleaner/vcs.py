"""Git operations used by the cleanup."""

from pathlib import Path
from typing import List, Optional, Protocol, Sequence

import git
from git import Repo

from shared.logger import get_logger

logger = get_logger(__name__)


class VersionControl(Protocol):
    """Branch operations the cleanup needs from a repository."""

    def list_local_branches(self) -> List[str]:
        ...

    def current_branch(self) -> Optional[str]:
        ...

    def delete_local_branches(self, branch_names: Sequence[str]) -> bool:
        ...

    def list_remote_branches(self, remote_name: str) -> List[str]:
        ...

    def delete_remote_branch(self, remote_name: str, branch_name: str) -> bool:
        ...


class GitRepository:
    """
    Local git repository accessed through GitPython.

    Attributes:
        repo_path: Path to git repository
        repo: GitPython Repo object
    """

    def __init__(self, repo_path: Optional[Path] = None):
        """
        Open a git repository.

        Args:
            repo_path: Path to git repository (defaults to current directory)

        Raises:
            ValueError: If path is not a git repository or git is missing
        """
        self.repo_path = repo_path or Path.cwd()
        self.repo = self._load_repo()

    def _load_repo(self) -> Repo:
        try:
            repo = Repo(self.repo_path, search_parent_directories=True)
            logger.debug(f"Loaded git repository from {self.repo_path}")
            return repo
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            raise ValueError(f"Not a git repository: {self.repo_path}")
        except git.exc.GitCommandNotFound:
            raise ValueError("unable to find 'git' command")

    def list_local_branches(self) -> List[str]:
        """Names of all local branches in lexical order."""
        return sorted(head.name for head in self.repo.heads)

    def current_branch(self) -> Optional[str]:
        """Name of the checked-out branch, or None on a detached HEAD."""
        try:
            return self.repo.active_branch.name
        except TypeError:
            return None

    def delete_local_branches(self, branch_names: Sequence[str]) -> bool:
        """
        Force-delete local branches in one batch.

        Args:
            branch_names: Branches to delete

        Returns:
            True if the batch was deleted
        """
        if not branch_names:
            return True

        try:
            self.repo.delete_head(*branch_names, force=True)
            logger.info(f"Deleted branches: {' '.join(branch_names)}")
            return True
        except git.exc.GitCommandError as e:
            logger.error(f"Failed to delete branches {' '.join(branch_names)}: {e}")
            return False

    def list_remote_branches(self, remote_name: str) -> List[str]:
        """
        Branch names on a remote, without the remote prefix.

        Args:
            remote_name: Remote to list (e.g. "origin")

        Returns:
            Branch names such as "feature/x" for "origin/feature/x"; empty if
            the remote does not exist
        """
        try:
            remote = self.repo.remote(remote_name)
        except ValueError:
            logger.debug(f"No remote named {remote_name}")
            return []

        names = []
        for ref in remote.refs:
            # origin/feature/x -> feature/x
            branch_name = ref.name.split("/", 1)[-1]
            if branch_name == "HEAD":
                continue
            names.append(branch_name)
        return sorted(names)

    def delete_remote_branch(self, remote_name: str, branch_name: str) -> bool:
        """
        Delete a branch on a remote by pushing an empty ref to it.

        Args:
            remote_name: Remote holding the branch
            branch_name: Branch name without the remote prefix

        Returns:
            True if deleted successfully
        """
        try:
            remote = self.repo.remote(remote_name)
            remote.push(refspec=f":{branch_name}").raise_if_error()
            logger.info(f"Deleted remote branch: {remote_name}/{branch_name}")
            return True
        except (ValueError, git.exc.GitCommandError) as e:
            logger.error(f"Failed to delete remote branch {remote_name}/{branch_name}: {e}")
            return False

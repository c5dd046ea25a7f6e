"""CLI interface for Issue Branch Cleaner."""

import sys
from pathlib import Path
from typing import List, Optional

import click

from shared.cli import create_table, error, handle_errors, info, literal, print_table
from shared.logger import setup_logger

from .cleanup import DEFAULT_REMOTE, BranchCheck, BranchCleanup
from .config import GitConfigStore, resolve_config
from .prompts import TerminalPrompter
from .tracker import AuthenticationError, GitHubIssueTracker
from .vcs import GitRepository


def strip_equals(
    ctx: click.Context, param: click.Parameter, value: Optional[str]
) -> Optional[str]:
    """Accept "-t=TOKEN" as well as "-t TOKEN" and "--token=TOKEN"."""
    if value and value.startswith("="):
        return value[1:]
    return value


def display_checks(checks: List[BranchCheck], title: str = "Branches (Dry Run)") -> None:
    """
    Display branch checks in a table.

    Args:
        checks: BranchCheck results to display
        title: Table title
    """
    if not checks:
        info("No branches found")
        return

    table = create_table(title=title)
    table.add_column("Branch", style="cyan")
    table.add_column("Issue", style="yellow")
    table.add_column("State", style="magenta")
    table.add_column("Action", style="dim")

    for check in checks:
        if check.skipped:
            table.add_row(check.branch, "-", "-", "skip")
            continue
        action = "delete" if check.is_closed else "keep"
        table.add_row(check.branch, check.issue_number, literal(check.state.label), action)

    print_table(table)


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("feature_branch", nargs=-1)
@click.option(
    "--user", "-u", callback=strip_equals, help="GitHub username (not needed with a token)"
)
@click.option(
    "--password", "-p", callback=strip_equals, help="GitHub password (not needed with a token)"
)
@click.option("--token", "-t", callback=strip_equals, help="GitHub OAuth token")
@click.option("--save", is_flag=True, help="Save the access token to git config")
@click.option("--issue", "-i", callback=strip_equals, help="Issue number")
@click.option(
    "--base", "-b", callback=strip_equals, help="Branch changes are pulled into (default: master)"
)
@click.option("--base-account", help="Account owning the repository and its issues")
@click.option("--base-repo", help="GitHub repository name")
@click.option(
    "--path",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    help="Path to git repository (defaults to current directory)",
)
@click.option(
    "--remote",
    default=DEFAULT_REMOTE,
    show_default=True,
    help="Remote whose orphaned branches are cleaned up",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show which branches would be deleted without deleting anything",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@handle_errors
def main(
    feature_branch: tuple,
    user: Optional[str],
    password: Optional[str],
    token: Optional[str],
    save: bool,
    issue: Optional[str],
    base: Optional[str],
    base_account: Optional[str],
    base_repo: Optional[str],
    path: Optional[Path],
    remote: str,
    dry_run: bool,
    verbose: bool,
):
    """
    Issue Branch Cleaner - Delete branches whose GitHub issue is closed.

    Branch names carry their issue number as "<name>_<issue>" or
    "<issue>_<name>". Settings are shared with git-open-pull:

        \b
        [github]
                user = ....
                password = ....
        [gitOpenPull]
                token = .....
                baseAccount = ....
                baseRepo = .....
                base = master

    Examples:

        \b
        # Interactive cleanup, saving the token for next time
        issue-branch-cleaner --save

        \b
        # See what would be deleted
        issue-branch-cleaner --dry-run

        \b
        # Clean up orphaned branches on a fork remote
        issue-branch-cleaner --remote myfork --base-account bitly --base-repo bitly
    """
    # Setup logging
    log_level = "DEBUG" if verbose else "INFO"
    setup_logger(__package__, level=log_level)

    try:
        repository = GitRepository(repo_path=path)
    except ValueError as e:
        error(str(e))
        sys.exit(1)

    store = GitConfigStore(repository.repo)
    tracker = GitHubIssueTracker()
    prompter = TerminalPrompter()

    # Unknown tokens land in feature_branch too, the last one wins
    branch = feature_branch[-1] if feature_branch else repository.current_branch()

    try:
        config = resolve_config(
            store,
            tracker,
            prompter,
            user=user,
            password=password,
            token=token,
            save=save,
            issue=issue,
            base=base,
            base_account=base_account,
            base_repo=base_repo,
            feature_branch=branch,
        )
    except AuthenticationError as e:
        error(literal(e.raw_body))
        sys.exit(1)

    cleanup = BranchCleanup(repository, tracker, prompter, config, remote=remote)

    if dry_run:
        checks = cleanup.check_branches()
        display_checks(checks)
        closed = [check for check in checks if check.is_closed]
        info(f"Dry run complete. {len(closed)} branch(es) would be deleted")
        sys.exit(0)

    cleanup.run()


if __name__ == "__main__":
    main()

"""Issue Branch Cleaner - Delete branches whose GitHub issue has been closed."""

from .cleanup import BranchCleanup, extract_issue_number

__all__ = ["BranchCleanup", "extract_issue_number"]

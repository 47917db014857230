"""
jiranch - Generate git branch names from Jira tickets.
"""

__version__ = "0.1.0"

from jiranch.branch import BranchNameInput, derive_branch_name

__all__ = ["BranchNameInput", "derive_branch_name", "__version__"]

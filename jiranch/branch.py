"""
Branch name derivation for jiranch

Turns a ticket title into a branch name of the form
"<short name>-<issue ID>-<slug>".
"""

import re
from dataclasses import dataclass
from typing import List

# Number of leading words of the ticket title kept in the slug
MAX_SUMMARY_WORDS = 5

# Anything outside [A-Za-z0-9_], one match per character
_DISALLOWED_CHAR = re.compile(r"[^A-Za-z0-9_]")

# A single whitespace character; runs of whitespace yield empty words
_WORD_SEPARATOR = re.compile(r"\s")


def sanitize_word(word: str) -> str:
    """
    Replace every character not in [A-Za-z0-9_] with an underscore.

    The result has the same length as the input, and sanitizing an
    already sanitized word returns it unchanged.

    Examples:
        - "crash!!" -> "crash__"
        - "can't" -> "can_t"
        - "naïve" -> "na_ve"
    """
    return _DISALLOWED_CHAR.sub("_", word)


def summary_words(summary: str, limit: int = MAX_SUMMARY_WORDS) -> List[str]:
    """
    Split a ticket summary into at most `limit` words.

    Every whitespace character separates two words, so repeated whitespace
    produces empty words. Words past the limit are dropped.
    """
    return _WORD_SEPARATOR.split(summary)[:limit]


def slugify_summary(summary: str) -> str:
    """
    Build the slug part of a branch name from a ticket summary.

    Examples:
        - "Fix the login page crash!!" -> "Fix-the-login-page-crash__"
        - "" -> ""
    """
    return "-".join(sanitize_word(word) for word in summary_words(summary))


def derive_branch_name(short_name: str, issue_id: str, summary: str) -> str:
    """
    Derive a branch name from a ticket.

    short_name and issue_id are used verbatim; only the summary is
    sanitized.

    Args:
        short_name: Project abbreviation from the config
        issue_id: Tracker issue key (e.g., "ABC-42")
        summary: Ticket title

    Returns:
        Branch name such as "ABC-ABC-42-Fix-the-login-page-crash__"
    """
    return f"{short_name}-{issue_id}-{slugify_summary(summary)}"


@dataclass(frozen=True)
class BranchNameInput:
    """Everything needed to name a branch for one ticket."""

    short_name: str
    issue_id: str
    summary: str

    @property
    def slug(self) -> str:
        return slugify_summary(self.summary)

    @property
    def branch_name(self) -> str:
        return derive_branch_name(self.short_name, self.issue_id, self.summary)

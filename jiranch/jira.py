"""
Minimal Jira REST client for jiranch.

Only fetches a single issue by key, authenticating with HTTP basic auth
(account name + API token).
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote, urlparse

import requests

from jiranch.config import Config

logger = logging.getLogger("jiranch.jira")

ISSUE_ENDPOINT = "rest/api/2/issue/{issue_id}"
DEFAULT_TIMEOUT = 30


class JiraError(Exception):
    """Base class for Jira client errors."""


class JiraClientError(JiraError):
    """Raised when a client cannot be built from the given settings."""


class JiraRequestError(JiraError):
    """Raised when fetching an issue fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class JiraIssue:
    """The parts of a Jira issue jiranch cares about."""

    key: str
    summary: str
    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, issue_id: str, data: Any) -> "JiraIssue":
        """
        Build an issue from the JSON body of GET /rest/api/2/issue/{key}.

        Raises:
            JiraRequestError: If the payload has no summary string
        """
        if not isinstance(data, dict) or not isinstance(data.get("fields"), dict):
            raise JiraRequestError(f"Unexpected response for issue {issue_id}: missing 'fields'")

        summary = data["fields"].get("summary")
        if not isinstance(summary, str):
            raise JiraRequestError(f"Issue {issue_id} has no summary")

        return cls(key=data.get("key") or issue_id, summary=summary, fields=data["fields"])


def _error_details(response: requests.Response) -> str:
    """Pull Jira's errorMessages/errors out of a failed response, if any."""
    try:
        body = response.json()
    except ValueError:
        return ""
    if not isinstance(body, dict):
        return ""

    messages = list(body.get("errorMessages") or [])
    errors = body.get("errors") or {}
    if isinstance(errors, dict):
        messages.extend(f"{k}: {v}" for k, v in errors.items())
    return "; ".join(str(m) for m in messages)


class JiraClient:
    """
    Fetches issues from a Jira instance.

    Can be used as a context manager to close the underlying HTTP session.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        token: str,
        timeout: int = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
    ):
        """
        Initialize the client.

        Args:
            base_url: Jira root URL (e.g., "https://company.atlassian.net")
            username: Jira account name or email
            token: Jira API token
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates

        Raises:
            JiraClientError: If base_url is not an absolute http(s) URL
        """
        base_url = (base_url or "").strip()
        if not base_url:
            raise JiraClientError("Jira base URL is empty")

        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https"):
            raise JiraClientError(f"Jira base URL must start with http:// or https://: {base_url!r}")
        if not parsed.netloc:
            raise JiraClientError(f"Jira base URL has no host: {base_url!r}")

        # Trailing slash keeps any context path (e.g., "/jira") when appending endpoints
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.verify_ssl = verify_ssl

        self.session = requests.Session()
        self.session.auth = requests.auth.HTTPBasicAuth(username, token)
        self.session.headers.update({"Accept": "application/json"})

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "JiraClient":
        """Build a client from the saved jiranch config."""
        return cls(config.jira_base_url, config.username, config.token, **kwargs)

    def issue_url(self, issue_id: str) -> str:
        return self.base_url + ISSUE_ENDPOINT.format(issue_id=quote(issue_id, safe=""))

    def get_issue(self, issue_id: str) -> JiraIssue:
        """
        Fetch one issue by key.

        Args:
            issue_id: Issue key (e.g., "ABC-42")

        Returns:
            The fetched JiraIssue

        Raises:
            JiraRequestError: On network errors, non-2xx responses, or
                an unexpected payload
        """
        url = self.issue_url(issue_id)
        logger.debug(f"GET {url}")

        try:
            response = self.session.get(
                url,
                params={"fields": "summary"},
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"Timed out fetching {issue_id}")
            raise JiraRequestError(f"Request timed out after {self.timeout} seconds") from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Connection error fetching {issue_id}: {e}")
            raise JiraRequestError(f"Connection error: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed for {issue_id}: {e}")
            raise JiraRequestError(f"Request failed: {e}") from e

        logger.debug(f"{response.status_code} {response.reason} for {issue_id}")

        if not response.ok:
            message = f"{response.status_code} {response.reason}"
            details = _error_details(response)
            if details:
                message = f"{message}: {details}"
            logger.error(f"Failed to fetch {issue_id}: {message}")
            raise JiraRequestError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise JiraRequestError(
                f"Invalid JSON in response for issue {issue_id}", status_code=response.status_code
            ) from e

        return JiraIssue.from_response(issue_id, data)

    def close(self):
        self.session.close()

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

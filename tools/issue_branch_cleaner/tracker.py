"""GitHub issue tracker client."""

import json
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol

import requests

from shared.logger import get_logger

logger = get_logger(__name__)

GITHUB_API_URL = "https://api.github.com"
ISSUE_ACCEPT = "application/vnd.github-issue.text+json,application/json"
TOKEN_SCOPES = ["repo"]
HTTP_TIMEOUT_SECS = 30

# Last issue payload seen, kept for debugging
DEBUG_PAYLOAD_PATH = Path(tempfile.gettempdir()) / "issue.json"


class AuthenticationError(Exception):
    """Raised when credentials could not be exchanged for a token."""

    def __init__(self, raw_body: str):
        super().__init__(raw_body or "no response from authorization endpoint")
        self.raw_body = raw_body


@dataclass
class TokenResult:
    """Outcome of a token exchange: either a token or the raw response body."""

    token: Optional[str] = None
    raw_body: str = ""

    @property
    def ok(self) -> bool:
        return bool(self.token)

    @classmethod
    def success(cls, token: str) -> "TokenResult":
        return cls(token=token)

    @classmethod
    def failure(cls, raw_body: str) -> "TokenResult":
        return cls(raw_body=raw_body)


class IssueStateKind(Enum):
    """Kinds of issue lookup results."""

    CLOSED = "closed"
    OPEN = "open"
    UNKNOWN = "unknown"
    TRANSPORT_ERROR = "transport_error"
    API_ERROR = "api_error"


@dataclass(frozen=True)
class IssueState:
    """
    State of an issue as reported by the tracker.

    Attributes:
        kind: Result kind
        detail: Raw state for OPEN, error message for API_ERROR
    """

    kind: IssueStateKind
    detail: str = ""

    @property
    def is_closed(self) -> bool:
        return self.kind is IssueStateKind.CLOSED

    @property
    def label(self) -> str:
        """Short text form of the state."""
        if self.kind is IssueStateKind.CLOSED:
            return "closed"
        if self.kind is IssueStateKind.OPEN:
            return self.detail
        if self.kind is IssueStateKind.UNKNOWN:
            return "unknown-issue"
        if self.kind is IssueStateKind.API_ERROR:
            return f"error: {self.detail}"
        return "-"

    @classmethod
    def from_payload(cls, payload: object) -> "IssueState":
        """
        Classify a decoded issue response.

        An error message wins over a state field. Anything that is not a
        JSON object counts as a transport error.
        """
        if not isinstance(payload, dict):
            return cls(IssueStateKind.TRANSPORT_ERROR)

        if "message" in payload:
            return cls(IssueStateKind.API_ERROR, str(payload["message"]))

        if "state" not in payload:
            return cls(IssueStateKind.UNKNOWN)

        state = str(payload["state"])
        if state == "closed":
            return cls(IssueStateKind.CLOSED)
        return cls(IssueStateKind.OPEN, state)


class IssueTracker(Protocol):
    """Operations the cleanup needs from an issue tracker."""

    def create_token(self, user: str, password: str) -> TokenResult:
        ...

    def get_issue_state(self, account: str, repo: str, number: str, token: str) -> IssueState:
        ...


class GitHubIssueTracker:
    """
    Issue tracker backed by the GitHub REST API.

    Attributes:
        api_url: Base API URL
        debug_path: File receiving the last raw issue payload (None disables it)
    """

    def __init__(
        self,
        api_url: str = GITHUB_API_URL,
        session: Optional[requests.Session] = None,
        debug_path: Optional[Path] = DEBUG_PAYLOAD_PATH,
        timeout: float = HTTP_TIMEOUT_SECS,
    ):
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.debug_path = debug_path
        self.timeout = timeout

    def create_token(self, user: str, password: str) -> TokenResult:
        """
        Exchange username and password for an OAuth token with repo scope.

        Args:
            user: GitHub username
            password: GitHub password

        Returns:
            TokenResult with the token, or the raw response body on failure
        """
        endpoint = f"{self.api_url}/authorizations"
        logger.debug(f"Requesting access token for {user}")

        try:
            response = self.session.post(
                endpoint,
                auth=(user, password),
                json={"scopes": TOKEN_SCOPES},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.debug(f"Token request failed: {e}")
            return TokenResult.failure(str(e))

        raw_body = response.text.strip()
        try:
            data = response.json()
        except ValueError:
            return TokenResult.failure(raw_body)

        if isinstance(data, dict) and data.get("token"):
            return TokenResult.success(str(data["token"]))
        return TokenResult.failure(raw_body)

    def get_issue_state(self, account: str, repo: str, number: str, token: str) -> IssueState:
        """
        Look up the state of one issue.

        Never raises for network or API problems; those are folded into the
        returned IssueState.

        Args:
            account: Repository owner
            repo: Repository name
            number: Issue number
            token: OAuth token

        Returns:
            IssueState for the issue
        """
        endpoint = f"{self.api_url}/repos/{account}/{repo}/issues/{number}"

        try:
            response = self.session.get(
                endpoint,
                params={"access_token": token},
                headers={"Accept": ISSUE_ACCEPT},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.debug(f"Issue {number} lookup failed: {e}")
            return IssueState(IssueStateKind.TRANSPORT_ERROR)

        raw_body = response.text.strip()
        self._write_debug_payload(raw_body)

        try:
            payload = json.loads(raw_body)
        except ValueError:
            logger.debug(f"Issue {number} response is not JSON (HTTP {response.status_code})")
            return IssueState(IssueStateKind.TRANSPORT_ERROR)

        state = IssueState.from_payload(payload)
        logger.debug(f"Issue {number}: {state.label}")
        return state

    def _write_debug_payload(self, raw_body: str) -> None:
        if self.debug_path is None:
            return
        try:
            self.debug_path.write_text(raw_body)
        except OSError as e:
            logger.warning(f"Could not write {self.debug_path}: {e}")

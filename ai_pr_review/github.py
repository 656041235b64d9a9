from __future__ import annotations
import logging
import requests

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from .review_models import ReviewComment
from .settings import GITHUB_API_BASE

logger = logging.getLogger(__name__)


class GitHubAPIError(RuntimeError):
    """Non-2xx response (or transport failure) from the GitHub REST API."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


@dataclass(frozen=True)
class PRDetails:
    owner: str
    repo: str
    pull_number: int
    title: str
    description: str


def _headers(accept: str, token: str | None = None) -> dict:
    h = {"User-Agent": "ai-pr-review/1.0", "Accept": accept}
    if token:
        h["Authorization"] = f"Bearer {token}"
    return h


class GitHubClient:
    """The three pull request endpoints the review run needs."""

    def __init__(self, token: str, base_url: str = GITHUB_API_BASE) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")

    def _pull_url(self, owner: str, repo: str, pull_number: int) -> str:
        return f"{self._base_url}/repos/{owner}/{repo}/pulls/{pull_number}"

    def _request(self, method: str, url: str, *, accept: str, timeout: int = 30, **kwargs) -> requests.Response:
        try:
            r = requests.request(method, url, headers=_headers(accept, self._token), timeout=timeout, **kwargs)
        except requests.RequestException as exc:
            raise GitHubAPIError(f"Request failed: {exc}") from exc

        if not r.ok:
            try:
                data = r.json() if r.content else {}
            except ValueError:
                data = {"message": r.text}
            message = data.get("message", "Unknown error") if isinstance(data, dict) else "Unknown error"
            raise GitHubAPIError(
                f"GitHub API error: {r.status_code} - {message}",
                status_code=r.status_code,
                response_data=data,
            )
        return r

    def get_pr_details(self, owner: str, repo: str, pull_number: int) -> PRDetails:
        r = self._request("GET", self._pull_url(owner, repo, pull_number), accept="application/vnd.github+json")
        data = r.json()
        return PRDetails(
            owner=owner,
            repo=repo,
            pull_number=pull_number,
            title=data.get("title") or "",
            description=data.get("body") or "",
        )

    def get_pr_diff(self, owner: str, repo: str, pull_number: int) -> Optional[str]:
        r = self._request(
            "GET",
            self._pull_url(owner, repo, pull_number),
            accept="application/vnd.github.v3.diff",
            timeout=60,
        )
        return r.text or None

    def create_review(
        self,
        owner: str,
        repo: str,
        pull_number: int,
        comments: Sequence[ReviewComment],
        event: str = "COMMENT",
    ) -> Dict[str, Any]:
        """Submit one pull request review carrying ``comments`` as inline comments."""
        payload: Dict[str, Any] = {
            "event": event,
            "comments": [c.model_dump() for c in comments],
        }
        r = self._request(
            "POST",
            f"{self._pull_url(owner, repo, pull_number)}/reviews",
            accept="application/vnd.github+json",
            json=payload,
        )
        logger.info("Created review with %d comment(s)", len(comments))
        return r.json() if r.content else {}

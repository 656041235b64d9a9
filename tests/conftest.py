from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import pytest

from ai_pr_review.github import GitHubAPIError, PRDetails


@dataclass
class FakeChatChoiceMessage:
    content: Optional[str]


@dataclass
class FakeChatChoice:
    message: FakeChatChoiceMessage


@dataclass
class FakeChatResponse:
    choices: List[FakeChatChoice]


@dataclass
class FakeText:
    value: str


@dataclass
class FakeTextBlock:
    text: FakeText
    type: str = "text"


@dataclass
class FakeThreadMessage:
    content: List[FakeTextBlock]
    role: str = "assistant"


@dataclass
class FakeMessagePage:
    data: List[FakeThreadMessage]


@dataclass
class FakeThread:
    id: str


@dataclass
class FakeRun:
    id: str
    status: str


class FakeOpenAI:
    """Deterministic OpenAI stub covering chat completions and assistant threads."""

    def __init__(
        self,
        *,
        completion_payloads: Iterable[Any] | None = None,
        run_status: str = "completed",
        thread_replies: Iterable[Optional[str]] | None = None,
    ) -> None:
        self._completion_payloads = list(completion_payloads or [])
        self._thread_replies = list(thread_replies or [])
        self.run_status = run_status
        self.completion_calls: List[Dict[str, Any]] = []
        self.thread_calls: List[Dict[str, Any]] = []
        self.run_calls: List[Dict[str, Any]] = []

        self.chat = type("Chat", (), {"completions": type("Completions", (), {"create": self._create_completion})()})()
        threads = type(
            "Threads",
            (),
            {
                "create": self._create_thread,
                "runs": type("Runs", (), {"create_and_poll": self._create_and_poll})(),
                "messages": type("Messages", (), {"list": self._list_messages})(),
            },
        )()
        self.beta = type("Beta", (), {"threads": threads})()

    # ------------------------------------------------------------------
    def _create_completion(self, **kwargs) -> FakeChatResponse:  # noqa: D401
        self.completion_calls.append(kwargs)
        payload = self._completion_payloads.pop(0) if self._completion_payloads else {"reviews": []}
        if isinstance(payload, Exception):
            raise payload
        content = payload if payload is None or isinstance(payload, str) else json.dumps(payload)
        return FakeChatResponse(choices=[FakeChatChoice(message=FakeChatChoiceMessage(content=content))])

    def _create_thread(self, *, messages: List[Dict[str, str]]) -> FakeThread:
        self.thread_calls.append({"messages": messages})
        return FakeThread(id=f"thread_{len(self.thread_calls)}")

    def _create_and_poll(self, *, thread_id: str, assistant_id: str) -> FakeRun:
        self.run_calls.append({"thread_id": thread_id, "assistant_id": assistant_id})
        return FakeRun(id=f"run_{len(self.run_calls)}", status=self.run_status)

    def _list_messages(self, *, thread_id: str) -> FakeMessagePage:
        reply = self._thread_replies.pop(0) if self._thread_replies else None
        if reply is None:
            return FakeMessagePage(data=[])
        return FakeMessagePage(data=[FakeThreadMessage(content=[FakeTextBlock(text=FakeText(value=reply))])])


class FakeGitHub:
    """In-memory stand-in for GitHubClient that records every call."""

    def __init__(
        self,
        *,
        diff: Optional[str] = "",
        title: str = "Add feature",
        body: str = "Adds a feature",
        fail_review_sizes: Iterable[int] = (),
        fail_first_review: bool = False,
    ) -> None:
        self.diff = diff
        self.title = title
        self.body = body
        self.fail_review_sizes = set(fail_review_sizes)
        self.fail_first_review = fail_first_review
        self.calls: List[str] = []
        self.reviews: List[List[Any]] = []

    def get_pr_details(self, owner: str, repo: str, pull_number: int) -> PRDetails:
        self.calls.append("get_pr_details")
        return PRDetails(owner=owner, repo=repo, pull_number=pull_number, title=self.title, description=self.body)

    def get_pr_diff(self, owner: str, repo: str, pull_number: int) -> Optional[str]:
        self.calls.append("get_pr_diff")
        return self.diff

    def create_review(self, owner, repo, pull_number, comments, event="COMMENT"):
        self.calls.append("create_review")
        self.reviews.append(list(comments))
        assert event == "COMMENT"
        if self.fail_first_review and len(self.reviews) == 1:
            raise GitHubAPIError("GitHub API error: 422 - Unprocessable", status_code=422, response_data={"message": "Unprocessable"})
        if len(comments) in self.fail_review_sizes:
            raise GitHubAPIError("GitHub API error: 422", status_code=422, response_data={"errors": ["bad line"]})
        return {"id": len(self.reviews)}


SINGLE_FILE_DIFF = """\
diff --git a/src/app.py b/src/app.py
index 1111111..2222222 100644
--- a/src/app.py
+++ b/src/app.py
@@ -40,3 +40,4 @@ def main():
 import os
-x = 1
+x = 2
+y = x
 print(x)
"""


@pytest.fixture
def pr_details() -> PRDetails:
    return PRDetails(owner="acme", repo="demo", pull_number=7, title="Add feature", description="Adds a feature")


@pytest.fixture
def write_event(tmp_path):
    def _write(body: Optional[str] = "please /ai-review this", **overrides) -> str:
        payload: Dict[str, Any] = {
            "repository": {"owner": {"login": "acme"}, "name": "demo"},
            "issue": {"number": 7},
        }
        if body is not None:
            payload["comment"] = {"body": body}
        payload.update(overrides)
        path = tmp_path / "event.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    return _write

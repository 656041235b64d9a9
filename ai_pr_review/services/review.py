from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..config import ActionConfig
from ..diff import DiffParser, filter_excluded
from ..events import comment_body, load_event
from ..github import GitHubAPIError, GitHubClient, PRDetails
from ..review_models import ReviewComment
from ..reviewer import ReviewEngine

logger = logging.getLogger(__name__)

STATUS_SKIPPED = "skipped"
STATUS_NO_DIFF = "no_diff"
STATUS_NO_COMMENTS = "no_comments"
STATUS_SUBMITTED = "submitted"
STATUS_BATCHED = "batched"


@dataclass
class ReviewOutcome:
    """What a single run did."""

    status: str
    pr: Optional[PRDetails] = None
    comments: List[ReviewComment] = field(default_factory=list)
    batches_attempted: int = 0
    batches_failed: int = 0


class ReviewService:
    """Drives one review run: event → PR → diff → model → review."""

    def __init__(
        self,
        *,
        config: ActionConfig,
        github: GitHubClient,
        engine: ReviewEngine,
        diff_parser: Optional[DiffParser] = None,
    ) -> None:
        self._config = config
        self._github = github
        self._engine = engine
        self._diff_parser = diff_parser or DiffParser()

    def run(self) -> ReviewOutcome:
        event = load_event(self._config.event_path)
        repository = event["repository"]
        pr = self._github.get_pr_details(
            repository["owner"]["login"],
            repository["name"],
            event["issue"]["number"],
        )

        # Only explicit review requests are handled; push "synchronize" events are ignored.
        if self._config.trigger_phrase not in comment_body(event):
            logger.info("Unsupported event: %s", self._config.event_name or "unknown")
            return ReviewOutcome(status=STATUS_SKIPPED, pr=pr)

        diff = self._github.get_pr_diff(pr.owner, pr.repo, pr.pull_number)
        if not diff:
            logger.info("No diff found")
            return ReviewOutcome(status=STATUS_NO_DIFF, pr=pr)

        files = filter_excluded(self._diff_parser.parse(diff), self._config.exclude_patterns)
        logger.info("Reviewing %d file(s) of PR #%d", len(files), pr.pull_number)

        comments = self._engine.analyze(files, pr)
        if not comments:
            return ReviewOutcome(status=STATUS_NO_COMMENTS, pr=pr)

        try:
            self._github.create_review(pr.owner, pr.repo, pr.pull_number, comments, event="COMMENT")
            return ReviewOutcome(status=STATUS_SUBMITTED, pr=pr, comments=comments)
        except GitHubAPIError as exc:
            logger.warning("Review submission failed, retrying in batches: %s", exc)

        attempted, failed = self._submit_in_batches(pr, comments)
        return ReviewOutcome(
            status=STATUS_BATCHED,
            pr=pr,
            comments=comments,
            batches_attempted=attempted,
            batches_failed=failed,
        )

    def _submit_in_batches(self, pr: PRDetails, comments: Sequence[ReviewComment]) -> tuple[int, int]:
        size = max(1, self._config.batch_size)
        attempted = failed = 0
        for start in range(0, len(comments), size):
            batch = comments[start:start + size]
            attempted += 1
            try:
                self._github.create_review(pr.owner, pr.repo, pr.pull_number, batch, event="COMMENT")
            except GitHubAPIError as exc:
                failed += 1
                logger.error(
                    "Error creating the comment: %s",
                    exc,
                    extra={"batch": attempted, "error_data": exc.response_data},
                )
        return attempted, failed

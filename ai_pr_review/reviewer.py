from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence

from .backends import ModelBackend
from .diff import DiffChunk, DiffFile
from .github import PRDetails
from .prompts import PromptBuilder
from .review_models import ReviewComment, ReviewResponse, ReviewSuggestion

logger = logging.getLogger(__name__)


@dataclass
class ChunkTask:
    file: DiffFile
    chunk: DiffChunk


def iter_chunk_tasks(files: Iterable[DiffFile]) -> Iterator[ChunkTask]:
    """Yield every reviewable hunk in diff order. Deleted files are skipped."""
    for file in files:
        if file.is_deleted:
            continue
        for chunk in file.chunks:
            yield ChunkTask(file=file, chunk=chunk)


def parse_line_number(value: str) -> Optional[int]:
    try:
        return int(value.strip())
    except (AttributeError, ValueError):
        return None


def create_comments(
    file: DiffFile,
    chunk: DiffChunk,
    suggestions: Sequence[ReviewSuggestion],
) -> List[ReviewComment]:
    """Turn model suggestions into inline review comments on ``file``.

    Line numbers are taken at face value; they are not checked against the
    span of ``chunk``.
    """
    if not file.to_path:
        return []

    comments: List[ReviewComment] = []
    for suggestion in suggestions:
        line = parse_line_number(suggestion.line_number)
        if line is None:
            logger.warning(
                "Dropping suggestion with non-numeric line number",
                extra={"path": file.to_path, "line_number": suggestion.line_number},
            )
            continue
        comments.append(ReviewComment(body=suggestion.review_comment, path=file.to_path, line=line))
    return comments


class ReviewEngine:
    """Reviews hunks one at a time and collects the resulting comments."""

    def __init__(self, backend: ModelBackend, prompt_builder: Optional[PromptBuilder] = None) -> None:
        self._backend = backend
        self._prompt_builder = prompt_builder or PromptBuilder()

    def get_ai_response(self, prompt: str) -> Optional[List[ReviewSuggestion]]:
        """Return the model's suggestions, or None when this hunk has to be skipped."""
        try:
            content = self._backend.complete(prompt)
            logger.debug("Model response: %s", content)
            return ReviewResponse.model_validate_json(content).reviews
        except Exception as exc:
            logger.error("Error analyzing the code: %s", exc, exc_info=True)
            return None

    def review_chunk(self, task: ChunkTask, pr_details: PRDetails) -> List[ReviewComment]:
        prompt = self._prompt_builder.build(
            task.file,
            task.chunk,
            pr_details,
            include_instructions=self._backend.include_instructions,
        )
        suggestions = self.get_ai_response(prompt)
        if not suggestions:
            return []
        return create_comments(task.file, task.chunk, suggestions)

    def analyze(self, files: Iterable[DiffFile], pr_details: PRDetails) -> List[ReviewComment]:
        comments: List[ReviewComment] = []
        chunks_seen = 0
        for task in iter_chunk_tasks(files):
            chunks_seen += 1
            comments.extend(self.review_chunk(task, pr_details))
        logger.info("Reviewed %d chunk(s), collected %d comment(s)", chunks_seen, len(comments))
        return comments

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from . import settings
from .diff import parse_patterns


@dataclass(frozen=True)
class ActionConfig:
    """Run-time configuration for one review run."""

    github_token: str
    openai_api_key: str
    model: str
    assistant_id: str
    use_assistant_api: bool = True
    exclude_patterns: List[str] = field(default_factory=list)
    event_path: str = ""
    event_name: str = ""
    trigger_phrase: str = "/ai-review"
    batch_size: int = 10
    instructions_path: str = ""
    github_api_base: str = "https://api.github.com"

    @classmethod
    def from_settings(cls) -> "ActionConfig":
        return cls(
            github_token=settings.GITHUB_TOKEN,
            openai_api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_API_MODEL,
            assistant_id=settings.OPENAI_ASSISTANT_ID,
            use_assistant_api=settings.USE_ASSISTANT_API,
            exclude_patterns=parse_patterns(settings.EXCLUDE_PATTERNS),
            event_path=settings.GITHUB_EVENT_PATH,
            event_name=settings.GITHUB_EVENT_NAME,
            trigger_phrase=settings.TRIGGER_PHRASE,
            batch_size=settings.REVIEW_BATCH_SIZE,
            instructions_path=settings.REVIEW_INSTRUCTIONS_PATH,
            github_api_base=settings.GITHUB_API_BASE,
        )

from __future__ import annotations
import logging
import sys

from openai import OpenAI

from .backends import build_backend
from .config import ActionConfig
from .events import EventPayloadError
from .github import GitHubClient
from .logging_config import configure_logging
from .prompts import PromptBuilder
from .reviewer import ReviewEngine
from .services import ReviewService

logger = logging.getLogger("ai_pr_review")


def build_service(config: ActionConfig, openai_client: OpenAI | None = None) -> ReviewService:
    client = openai_client or OpenAI(api_key=config.openai_api_key or None)
    backend = build_backend(
        client,
        use_assistant=config.use_assistant_api,
        model=config.model,
        assistant_id=config.assistant_id,
    )
    engine = ReviewEngine(backend, PromptBuilder(config.instructions_path or None))
    github = GitHubClient(config.github_token, base_url=config.github_api_base)
    return ReviewService(config=config, github=github, engine=engine)


def main() -> int:
    configure_logging()
    try:
        config = ActionConfig.from_settings()
        outcome = build_service(config).run()
    except EventPayloadError as exc:
        logger.error("Cannot read the triggering event: %s", exc)
        return 0
    except Exception:
        logger.exception("Error")
        return 1

    logger.info(
        "Run finished: %s",
        outcome.status,
        extra={"comments": len(outcome.comments), "batches_failed": outcome.batches_failed},
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

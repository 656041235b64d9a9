from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class EventPayloadError(ValueError):
    """The workflow event file is missing or does not look like an issue comment event."""


def load_event(path: Optional[str]) -> Dict[str, Any]:
    """Read the JSON payload the Actions runner wrote for the triggering event.

    ``issue.number`` is returned as an ``int``.
    """
    if not path:
        raise EventPayloadError("GITHUB_EVENT_PATH is not set")

    event_file = Path(path)
    try:
        payload = json.loads(event_file.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise EventPayloadError(f"Event file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise EventPayloadError(f"Cannot read event file {path}: {exc}") from exc
    except ValueError as exc:
        raise EventPayloadError(f"Event file is not valid JSON: {path}") from exc

    if not isinstance(payload, dict):
        raise EventPayloadError("Event payload must be a JSON object")

    repository = payload.get("repository")
    issue = payload.get("issue")
    if not isinstance(repository, dict) or not isinstance(repository.get("owner"), dict):
        raise EventPayloadError("Event payload has no repository owner/name")
    if not repository["owner"].get("login") or not repository.get("name"):
        raise EventPayloadError("Event payload has no repository owner/name")
    if not isinstance(issue, dict):
        raise EventPayloadError("Event payload has no issue number")

    number = issue.get("number")
    if isinstance(number, bool):
        raise EventPayloadError(f"Invalid issue number: {number!r}")
    try:
        issue["number"] = int(number)
    except (TypeError, ValueError) as exc:
        raise EventPayloadError(f"Invalid issue number: {number!r}") from exc

    logger.debug("Loaded event payload", extra={"event_path": str(event_file)})
    return payload


def comment_body(payload: Dict[str, Any]) -> str:
    comment = payload.get("comment")
    if not isinstance(comment, dict):
        return ""
    body = comment.get("body")
    return body if isinstance(body, str) else ""

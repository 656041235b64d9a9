from __future__ import annotations

import logging
from typing import Any, Dict, Protocol, Sequence

from openai import OpenAI

logger = logging.getLogger(__name__)

EMPTY_RESPONSE = "{}"

# Model ids that accept response_format={"type": "json_object"}
_JSON_MODE_MARKERS: Sequence[str] = ("gpt-4",)


class AssistantRunError(RuntimeError):
    def __init__(self, status: str, run_id: str | None = None) -> None:
        super().__init__(f"Assistant run failed with status {status!r}")
        self.status = status
        self.run_id = run_id


class ModelBackend(Protocol):
    # whether the review instructions must travel inside the prompt
    include_instructions: bool

    def complete(self, prompt: str) -> str:
        ...


class AssistantBackend:
    """Runs the prompt on a thread against a preconfigured assistant.

    The assistant profile carries the review instructions, so prompts sent
    here omit them.
    """

    include_instructions = False

    def __init__(self, client: OpenAI, assistant_id: str) -> None:
        self._client = client
        self._assistant_id = assistant_id

    def complete(self, prompt: str) -> str:
        logger.info("Using assistant %s", self._assistant_id)
        thread = self._client.beta.threads.create(
            messages=[{"role": "user", "content": prompt}],
        )
        logger.info("Created thread %s", thread.id)

        run = self._client.beta.threads.runs.create_and_poll(
            thread_id=thread.id,
            assistant_id=self._assistant_id,
        )
        logger.info("Run finished with status: %s", run.status)
        if run.status != "completed":
            raise AssistantRunError(run.status, getattr(run, "id", None))

        messages = self._client.beta.threads.messages.list(thread_id=thread.id)
        # newest message first
        for message in messages.data[:1]:
            text = _message_text(message)
            if text.strip():
                return text.strip()
        return EMPTY_RESPONSE


def _message_text(message: Any) -> str:
    parts = []
    for block in getattr(message, "content", None) or []:
        text = getattr(block, "text", None)
        value = getattr(text, "value", None)
        if value:
            parts.append(value)
    return "".join(parts)


class CompletionBackend:
    """Single-turn chat completion with fixed sampling parameters."""

    include_instructions = True

    def __init__(
        self,
        client: OpenAI,
        model: str,
        *,
        temperature: float = 0.2,
        max_tokens: int = 700,
        top_p: float = 1,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._top_p = top_p

    @property
    def supports_json_mode(self) -> bool:
        return any(marker in self._model for marker in _JSON_MODE_MARKERS)

    def complete(self, prompt: str) -> str:
        params: Dict[str, Any] = {
            "model": self._model,
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "top_p": self._top_p,
            "frequency_penalty": 0,
            "presence_penalty": 0,
        }
        if self.supports_json_mode:
            params["response_format"] = {"type": "json_object"}

        response = self._client.chat.completions.create(
            messages=[{"role": "system", "content": prompt}],
            **params,
        )
        if not response.choices:
            return EMPTY_RESPONSE
        content = response.choices[0].message.content
        return (content or "").strip() or EMPTY_RESPONSE


def build_backend(client: OpenAI, *, use_assistant: bool, model: str, assistant_id: str) -> ModelBackend:
    if use_assistant:
        return AssistantBackend(client, assistant_id)
    return CompletionBackend(client, model)

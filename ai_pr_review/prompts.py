from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .diff import DiffChunk, DiffFile
from .github import PRDetails

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTIONS_PATH = Path(__file__).resolve().parent / "resources" / "review_instructions.txt"


def load_instructions(path: Optional[str] = None) -> str:
    return Path(path or DEFAULT_INSTRUCTIONS_PATH).read_text(encoding="utf-8")


class PromptBuilder:
    """Renders the review request for one hunk of one file.

    PR title, description and diff text are interpolated as-is. Anything an
    author writes there reaches the model unfiltered.
    """

    def __init__(self, instructions_path: Optional[str] = None) -> None:
        self._instructions_path = instructions_path
        self._instructions: Optional[str] = None

    @property
    def instructions(self) -> str:
        if self._instructions is None:
            self._instructions = load_instructions(self._instructions_path)
        return self._instructions

    def build(
        self,
        file: DiffFile,
        chunk: DiffChunk,
        pr_details: PRDetails,
        *,
        include_instructions: bool = True,
    ) -> str:
        preamble = self.instructions if include_instructions else ""
        change_lines = "\n".join(f"{c.line_number} {c.content}" for c in chunk.changes)

        prompt = f"""{preamble}

Review the following code diff in the file "{file.to_path}" and take the pull request title and description into account when writing the response.

Pull request title: {pr_details.title}
Pull request description:

---
{pr_details.description}
---

Git diff to review:

```diff
{chunk.content}
{change_lines}
```
"""
        logger.debug("Built prompt for %s\n%s", file.to_path, prompt)
        return prompt

from __future__ import annotations

from tests.conftest import SINGLE_FILE_DIFF
from ai_pr_review.diff import DiffParser
from ai_pr_review.prompts import PromptBuilder, load_instructions


def _file_and_chunk():
    f = DiffParser().parse(SINGLE_FILE_DIFF)[0]
    return f, f.chunks[0]


def test_prompt_embeds_pr_details_and_numbered_changes(pr_details):
    f, chunk = _file_and_chunk()
    prompt = PromptBuilder().build(f, chunk, pr_details, include_instructions=False)

    assert 'in the file "src/app.py"' in prompt
    assert "Pull request title: Add feature" in prompt
    assert "---\nAdds a feature\n---" in prompt
    assert "```diff\n@@ -40,3 +40,4 @@ def main():\n40  import os\n41 -x = 1\n41 +x = 2\n42 +y = x\n43  print(x)\n```" in prompt
    assert "Your task is to review pull requests" not in prompt


def test_prompt_prepends_instructions_when_requested(pr_details):
    f, chunk = _file_and_chunk()
    prompt = PromptBuilder().build(f, chunk, pr_details, include_instructions=True)
    assert prompt.startswith(load_instructions())


def test_custom_instructions_path(tmp_path, pr_details):
    custom = tmp_path / "instructions.txt"
    custom.write_text("Only flag security issues.", encoding="utf-8")
    f, chunk = _file_and_chunk()

    prompt = PromptBuilder(str(custom)).build(f, chunk, pr_details)
    assert prompt.startswith("Only flag security issues.")

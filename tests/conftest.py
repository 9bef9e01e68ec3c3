from __future__ import annotations

from pathlib import Path

import pytest


TEMPLATE_YAML = """\
model: gpt-4
config:
  temperature: 0.3
  max_tokens: 64
input:
  text: string
output:
  summary: string
prompt: "Summarize: {{text}}"
"""


@pytest.fixture
def template_file(tmp_path: Path) -> Path:
    path = tmp_path / "summarize.prompt"
    path.write_text(TEMPLATE_YAML, encoding="utf-8")
    return path

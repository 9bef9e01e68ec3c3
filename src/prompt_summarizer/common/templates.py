"""Prompt templating helpers.

Templates are YAML documents on disk::

    model: gpt-4
    config:
      temperature: 0.7
      max_tokens: 150
    prompt: |
      Summarize the following text:
      {{text}}

Only ``prompt`` and ``config`` drive generation; ``model``, ``input`` and
``output`` are descriptive and not validated.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from prompt_summarizer.common.errors import (
    TemplateError,
    TemplateNotFoundError,
    TemplateParseError,
)

PLACEHOLDER = "{{text}}"
DEFAULT_TEMPLATE_PATH = "prompts/summarize.prompt"


class GenerationConfig(BaseModel):
    """Sampling parameters; unset values fall back to client defaults."""

    model_config = ConfigDict(frozen=True, extra="allow", protected_namespaces=())

    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None


class PromptTemplate(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", protected_namespaces=())

    prompt: str
    config: GenerationConfig
    model: str | None = None
    input: Any = None
    output: Any = None


def load_template(path: str | Path = DEFAULT_TEMPLATE_PATH) -> PromptTemplate:
    """
    Load and parse a prompt template file.

    The file is read on every call; nothing is cached.

    Args:
        path: Path to template.

    Raises:
        TemplateNotFoundError: Path does not exist or is not a file.
        TemplateParseError: Not UTF-8, invalid YAML, or missing
            ``prompt``/``config``.
        TemplateError: The file exists but cannot be read.
    """
    p = Path(path)
    try:
        content = p.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
        raise TemplateNotFoundError(f"Prompt template not found: {p}") from e
    except UnicodeDecodeError as e:
        raise TemplateParseError(f"Prompt template {p} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise TemplateError(f"Cannot read prompt template {p}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise TemplateParseError(f"Invalid YAML in prompt template {p}: {e}") from e

    if not isinstance(data, dict):
        raise TemplateParseError(f"Prompt template {p} must be a mapping")

    try:
        return PromptTemplate.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(x) for x in err["loc"]) for err in e.errors())
        raise TemplateParseError(f"Invalid prompt template {p}: bad or missing {fields}") from e


def render_prompt(template: PromptTemplate, user_input: str) -> str:
    """
    Render user input into the template.

    Only the first ``{{text}}`` is replaced and the inserted text is not
    scanned again. A template without the placeholder renders unchanged.

    Args:
        template: Parsed template.
        user_input: Input string, inserted verbatim.

    Returns:
        Rendered prompt.
    """
    if PLACEHOLDER not in template.prompt:
        return template.prompt
    return template.prompt.replace(PLACEHOLDER, user_input, 1)

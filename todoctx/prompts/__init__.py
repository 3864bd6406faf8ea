"""Prompt section templates.

A prompt is one ``file_section`` per included file followed by a single
``closing`` section holding the call to action. The Markdown templates
live beside this module and are rendered byte-exact: Jinja2 keeps
trailing newlines and applies no block trimming or escaping, because the
marker validator counts the resulting lines.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

_PROMPTS_DIR = Path(__file__).parent

_ENV = Environment(
    loader=FileSystemLoader(str(_PROMPTS_DIR)),
    keep_trailing_newline=True,
    autoescape=False,
)


def render_prompt(template_name: str, **variables: object) -> str:
    """Render ``<template_name>.md`` with the given variables.

    Raises:
        FileNotFoundError: If no such template ships with the package.
    """
    try:
        template = _ENV.get_template(f"{template_name}.md")
    except TemplateNotFound:
        raise FileNotFoundError(
            f"Prompt template not found: {_PROMPTS_DIR / template_name}.md"
        ) from None
    return template.render(**variables)


def render_file_section(
    basename: str, content: str, diff: str | None = None, branch: str | None = None
) -> str:
    """Section for one file; the diff block is left out when ``diff`` is empty."""
    return render_prompt(
        "file_section", basename=basename, content=content, diff=diff, branch=branch
    )


def render_closing(instruction: str) -> str:
    return render_prompt("closing", instruction=instruction)

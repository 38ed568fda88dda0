from pathlib import Path

import pytest

from pagegen.config import SiteConfig
from pagegen.render import TemplateEngine

PAGE_TEMPLATE = (
    "<title>{{ title }} | {{ site_title }}</title>\n"
    '<a href="{{ base_url }}">home</a>\n'
    "{{ content|safe }}"
)
INDEX_TEMPLATE = (
    "{{ site_title }}|{{ base_url }}\n"
    "{% for page in pages %}{{ page.path }}:{{ page.title }}:{{ page.tags|join(',') }}\n{% endfor %}"
)

FRONT_MATTER = """---
title: {title}
description: A page about things
tags: [python, static-sites]
related: [other-page, missing-page]
publish_date: 2024-01-15
numeric_attributes: [1.5, 2, -0.25]
---
"""


class RecordingEngine:
    """Template renderer that records every call and echoes the context."""

    def __init__(self):
        self.calls = []

    def render(self, name, context):
        self.calls.append((name, context))
        return f"{name}:{context.get('title', '')}\n"


@pytest.fixture
def content_text():
    def make(title="Hello", body="Some *body* text.\n"):
        return FRONT_MATTER.format(title=title) + body

    return make


@pytest.fixture
def templates_dir(tmp_path) -> Path:
    path = tmp_path / "templates"
    path.mkdir()
    (path / "template.html").write_text(PAGE_TEMPLATE, encoding="utf-8")
    (path / "index.html").write_text(INDEX_TEMPLATE, encoding="utf-8")
    return path


@pytest.fixture
def content_dir(tmp_path) -> Path:
    path = tmp_path / "content"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "output"


@pytest.fixture
def site_config(content_dir, output_dir, templates_dir) -> SiteConfig:
    return SiteConfig(
        site_title="My Site",
        base_url="https://example.com",
        theme="",
        content_location=content_dir,
        output_location=output_dir,
        templates_location=templates_dir,
    )


@pytest.fixture
def engine(templates_dir) -> TemplateEngine:
    return TemplateEngine(templates_dir, required=("template.html", "index.html"))


@pytest.fixture
def recording_engine() -> RecordingEngine:
    return RecordingEngine()

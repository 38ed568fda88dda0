"""Tests for the Markdown adapter, the Jinja2 engine and file helpers."""

import pytest

from pagegen.errors import IoError, RenderError, TemplateInitError
from pagegen.render import TemplateEngine, ensure_dir, read_text, render_markdown, write_text


class TestRenderMarkdown:
    def test_heading(self):
        assert render_markdown("# Hello, World!") == "<h1>Hello, World!</h1>\n"

    def test_paragraph(self):
        assert render_markdown("This is a paragraph.") == "<p>This is a paragraph.</p>\n"

    def test_link(self):
        html = render_markdown("[Text](http://example.com/)")
        assert html == '<p><a href="http://example.com/">Text</a></p>\n'

    def test_empty_input(self):
        assert render_markdown("") == ""

    @pytest.mark.parametrize(
        "text",
        [
            "[unmatched bracket",
            "*unterminated emphasis",
            "**bold without end",
            "`open code span",
            "```\nunterminated fence",
            "<div>unclosed html",
            "[link](",
            "| a | b |\n|---|",
            "> \n>",
            "\t\n   \n",
            "- " * 3000 + "x",
        ],
    )
    def test_never_fails(self, text):
        assert isinstance(render_markdown(text), str)

    def test_deep_nesting_falls_back_to_escaped_text(self):
        html = render_markdown("- " * 3000 + "<b>x</b>")
        assert html.startswith("<p>- - ")
        assert html.endswith("&lt;b&gt;x&lt;/b&gt;</p>\n")

    def test_fenced_code_is_highlighted(self):
        html = render_markdown("```python\nprint('hi')\n```\n")
        assert 'class="codehilite"' in html

    def test_tables(self):
        html = render_markdown("| a | b |\n|---|---|\n| 1 | 2 |\n")
        assert "<table>" in html

    def test_single_trailing_newline(self):
        html = render_markdown("one\n\ntwo\n\n\n")
        assert html.endswith("</p>\n")
        assert not html.endswith("\n\n")


class TestTemplateEngine:
    def test_renders_context(self, engine):
        output = engine.render("template.html", {
            "title": "Hi",
            "site_title": "Site",
            "base_url": "https://example.com",
            "content": "<p>x</p>",
        })
        assert "<title>Hi | Site</title>" in output
        assert "<p>x</p>" in output

    def test_autoescapes_variables(self, engine):
        output = engine.render("template.html", {
            "title": "<b>bold</b>",
            "site_title": "Site",
            "base_url": "",
            "content": "<em>kept</em>",
        })
        assert "&lt;b&gt;bold&lt;/b&gt;" in output
        assert "<em>kept</em>" in output

    def test_missing_variable_is_render_error(self, engine):
        with pytest.raises(RenderError):
            engine.render("template.html", {"title": "Hi"})

    def test_unknown_template_is_render_error(self, engine):
        with pytest.raises(RenderError):
            engine.render("nope.html", {})

    def test_missing_directory(self, tmp_path):
        with pytest.raises(TemplateInitError):
            TemplateEngine(tmp_path / "missing")

    def test_missing_required_template(self, templates_dir):
        (templates_dir / "index.html").unlink()
        with pytest.raises(TemplateInitError) as excinfo:
            TemplateEngine(templates_dir, required=("template.html", "index.html"))
        assert "index.html" in str(excinfo.value)

    def test_syntax_error_in_any_template(self, templates_dir):
        (templates_dir / "partial.html").write_text("{% for x in %}", encoding="utf-8")
        with pytest.raises(TemplateInitError):
            TemplateEngine(templates_dir)

    def test_non_template_files_are_skipped(self, templates_dir):
        (templates_dir / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe")
        TemplateEngine(templates_dir, required=("template.html",))

    def test_theme_overrides_base_templates(self, templates_dir):
        theme_dir = templates_dir / "dark"
        theme_dir.mkdir()
        (theme_dir / "template.html").write_text("dark:{{ title }}", encoding="utf-8")
        engine = TemplateEngine(templates_dir, theme="dark", required=("template.html", "index.html"))
        assert engine.render("template.html", {"title": "T"}) == "dark:T"
        assert engine.render("index.html", {"site_title": "S", "base_url": "u", "pages": []}) == "S|u\n"

    def test_missing_theme(self, templates_dir):
        with pytest.raises(TemplateInitError):
            TemplateEngine(templates_dir, theme="absent")


class TestFileHelpers:
    def test_write_creates_parents(self, tmp_path):
        path = tmp_path / "a" / "b" / "page.html"
        write_text(path, "hello")
        assert read_text(path) == "hello"

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(IoError):
            read_text(tmp_path / "missing.md")

    def test_read_invalid_utf8(self, tmp_path):
        path = tmp_path / "bad.md"
        path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(IoError):
            read_text(path)

    def test_write_over_directory_fails(self, tmp_path):
        (tmp_path / "page.html").mkdir()
        with pytest.raises(IoError):
            write_text(tmp_path / "page.html", "x")

    def test_ensure_dir_blocked_by_file(self, tmp_path):
        blocker = tmp_path / "out"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(IoError):
            ensure_dir(blocker / "site")

"""Tests for Jinja2 template rendering and raw resource copies."""

from __future__ import annotations

from pathlib import Path

import pytest

from idempiere_cli.core.scaffold_result import ErrorCode, RenderError
from idempiere_cli.core.template_renderer import TEMPLATES_DIR, TemplateRenderer


@pytest.fixture
def renderer(tmp_path: Path) -> TemplateRenderer:
    templates = tmp_path / "templates"
    (templates / "sample").mkdir(parents=True)
    (templates / "sample" / "Hello.java.j2").write_text("class {{ className }} {}\n", encoding="utf-8")
    (templates / "sample" / "escape.j2").write_text("{{ value | xml_escape }}", encoding="utf-8")
    (templates / "sample" / "pascal.j2").write_text("{{ value | pascal_case }}", encoding="utf-8")
    return TemplateRenderer(templates)


class TestRender:
    """Strict rendering: missing data is an error, never an empty string."""

    def test_render_substitutes_values(self, renderer: TemplateRenderer) -> None:
        assert renderer.render("sample/Hello.java.j2", {"className": "Order"}) == "class Order {}\n"

    def test_missing_key_raises_render_error(self, renderer: TemplateRenderer) -> None:
        with pytest.raises(RenderError, match="missing data") as exc_info:
            renderer.render("sample/Hello.java.j2", {})
        assert exc_info.value.code == ErrorCode.GENERATION_FAILED

    def test_missing_template_raises_render_error(self, renderer: TemplateRenderer) -> None:
        with pytest.raises(RenderError, match="Template not found: sample/Absent.j2"):
            renderer.render("sample/Absent.j2", {})

    def test_xml_escape_filter(self, renderer: TemplateRenderer) -> None:
        assert renderer.render("sample/escape.j2", {"value": 'A & "B"'}) == "A &amp; &quot;B&quot;"

    def test_pascal_case_filter(self, renderer: TemplateRenderer) -> None:
        assert renderer.render("sample/pascal.j2", {"value": "my-plugin"}) == "MyPlugin"


class TestWriting:
    """Existing files are skipped, never overwritten."""

    def test_render_to_file_creates_parents(
        self,
        renderer: TemplateRenderer,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        target = tmp_path / "out" / "src" / "Order.java"
        assert renderer.render_to_file("sample/Hello.java.j2", {"className": "Order"}, target)
        assert target.read_text(encoding="utf-8") == "class Order {}\n"
        assert "Created:" in capsys.readouterr().out

    def test_render_to_file_skips_existing(
        self,
        renderer: TemplateRenderer,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        target = tmp_path / "Order.java"
        target.write_text("// hand written\n", encoding="utf-8")
        assert not renderer.render_to_file("sample/Hello.java.j2", {"className": "Order"}, target)
        assert target.read_text(encoding="utf-8") == "// hand written\n"
        assert "Skipped (exists)" in capsys.readouterr().out

    def test_write_text_skips_existing(self, renderer: TemplateRenderer, tmp_path: Path) -> None:
        target = tmp_path / ".gitignore"
        assert renderer.write_text(target, "target/\n")
        assert not renderer.write_text(target, "other\n")
        assert target.read_text(encoding="utf-8") == "target/\n"


class TestCopyResource:
    """Assets with their own expression syntax are copied byte-for-byte."""

    def test_zul_page_is_copied_verbatim(self, tmp_path: Path) -> None:
        renderer = TemplateRenderer()
        target = tmp_path / "web" / "form.zul"
        assert renderer.copy_resource("zk-form-zul/form.zul", target)
        source = TEMPLATES_DIR / "zk-form-zul" / "form.zul"
        assert target.read_bytes() == source.read_bytes()
        assert "${arg.controller}" in target.read_text(encoding="utf-8")

    def test_missing_resource(self, renderer: TemplateRenderer, tmp_path: Path) -> None:
        with pytest.raises(RenderError, match="Resource not found"):
            renderer.copy_resource("sample/absent.zul", tmp_path / "absent.zul")

"""Tests for ``idempiere-cli init``."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from click.testing import Result


class TestInitStandalone:
    """Single-plugin projects."""

    def test_creates_process_plugin(self, run_cli: Callable[..., Result], tmp_path: Path) -> None:
        result = run_cli("init", "org.acme.sales", "--standalone", "--with-process", "--output-dir", str(tmp_path))

        assert result.exit_code == 0, result.output
        src_dir = tmp_path / "org.acme.sales" / "src" / "org" / "acme" / "sales"
        assert (src_dir / "SalesProcess.java").is_file()
        assert (src_dir / "SalesProcessFactory.java").is_file()
        assert "Plugin created successfully!" in result.output
        assert "Next steps:" in result.output

    def test_with_test_flag(self, run_cli: Callable[..., Result], tmp_path: Path) -> None:
        result = run_cli("init", "org.acme.sales", "--standalone", "--with-test", "--output-dir", str(tmp_path))
        assert result.exit_code == 0, result.output
        assert (tmp_path / "org.acme.sales" / "src" / "org" / "acme" / "sales" / "SalesTest.java").is_file()

    def test_vendor_from_global_config(
        self,
        run_cli: Callable[..., Result],
        tmp_path: Path,
        isolated_home: Path,
    ) -> None:
        (isolated_home / ".idempiere-cli.yaml").write_text("defaults:\n  vendor: ACME Corp\n", encoding="utf-8")

        result = run_cli("init", "org.acme.sales", "--standalone", "--output-dir", str(tmp_path))

        assert result.exit_code == 0, result.output
        manifest = (tmp_path / "org.acme.sales" / "META-INF" / "MANIFEST.MF").read_text(encoding="utf-8")
        assert "Bundle-Vendor: ACME Corp" in manifest

    def test_vendor_flag_overrides_config(
        self,
        run_cli: Callable[..., Result],
        tmp_path: Path,
        isolated_home: Path,
    ) -> None:
        (isolated_home / ".idempiere-cli.yaml").write_text("defaults:\n  vendor: ACME Corp\n", encoding="utf-8")
        run_cli("init", "org.acme.sales", "--standalone", "--vendor", "Other Ltd", "--output-dir", str(tmp_path))
        manifest = (tmp_path / "org.acme.sales" / "META-INF" / "MANIFEST.MF").read_text(encoding="utf-8")
        assert "Bundle-Vendor: Other Ltd" in manifest


class TestInitMultiModule:
    """Multi-module projects are the default."""

    def test_default_modules(self, run_cli: Callable[..., Result], tmp_path: Path) -> None:
        result = run_cli(
            "init", "org.acme.sales", "--with-callout", "--with-fragment", "--with-feature",
            "--output-dir", str(tmp_path),
        )

        assert result.exit_code == 0, result.output
        root = tmp_path / "org.acme.sales"
        for module in ("parent", "base", "base.test", "fragment", "feature", "p2"):
            assert (root / f"org.acme.sales.{module}").is_dir(), module
            assert f"org.acme.sales.{module}/" in result.output
        assert (root / "org.acme.sales.base" / "src" / "org" / "acme" / "sales" / "base" / "SalesCallout.java").is_file()

    def test_no_test(self, run_cli: Callable[..., Result], tmp_path: Path) -> None:
        result = run_cli("init", "org.acme.sales", "--no-test", "--output-dir", str(tmp_path))
        assert result.exit_code == 0, result.output
        assert not (tmp_path / "org.acme.sales" / "org.acme.sales.base.test").exists()

    def test_older_platform(self, run_cli: Callable[..., Result], tmp_path: Path) -> None:
        result = run_cli("init", "org.acme.sales", "--idempiere-version", "12", "--output-dir", str(tmp_path))
        assert result.exit_code == 0, result.output
        parent_pom = tmp_path / "org.acme.sales" / "org.acme.sales.parent" / "pom.xml"
        assert "<maven.compiler.release>17</maven.compiler.release>" in parent_pom.read_text(encoding="utf-8")


class TestInitErrors:
    """Exit codes: 1 for bad input, 3 when the target already exists."""

    def test_unsupported_version(self, run_cli: Callable[..., Result], tmp_path: Path) -> None:
        result = run_cli("init", "org.acme.sales", "--idempiere-version", "11", "--output-dir", str(tmp_path))
        assert result.exit_code == 1
        assert "Unsupported iDempiere version: 11" in result.output
        assert not (tmp_path / "org.acme.sales").exists()

    def test_invalid_plugin_id(self, run_cli: Callable[..., Result], tmp_path: Path) -> None:
        result = run_cli("init", "sales", "--output-dir", str(tmp_path))
        assert result.exit_code == 1
        assert "at least two" in result.output

    def test_existing_directory(self, run_cli: Callable[..., Result], tmp_path: Path) -> None:
        (tmp_path / "org.acme.sales").mkdir()
        result = run_cli("init", "org.acme.sales", "--output-dir", str(tmp_path))
        assert result.exit_code == 3
        assert "already exists" in result.output

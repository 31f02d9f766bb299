"""Tests for aggregator, category and feature synchronisation."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from idempiere_cli.core.project_detector import detect_modules
from idempiere_cli.core.structural_mutator import (
    add_bundle_to_category,
    add_feature_to_category,
    add_module,
    add_plugin_to_feature,
    category_name_for,
    find_category_file,
    new_category_document,
    new_feature_document,
)
from idempiere_cli.core.xml_document import XmlDocument

POM_WITH_ONE_MODULE = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <packaging>pom</packaging>
  <modules>
      <module>org.acme.sales.base</module>
  </modules>
</project>
"""

POM_WITHOUT_MODULES = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <packaging>pom</packaging>
</project>
"""


def _write_pom(root: Path, content: str) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    pom = root / "pom.xml"
    pom.write_text(content, encoding="utf-8")
    return pom


class TestAddModule:
    """Module registration is additive and idempotent."""

    def test_second_module_keeps_original_formatting(self, tmp_path: Path) -> None:
        pom = _write_pom(tmp_path / "root", POM_WITH_ONE_MODULE)

        assert add_module(tmp_path / "root", "org.acme.sales.extra")

        content = pom.read_text(encoding="utf-8")
        assert detect_modules(tmp_path / "root") == ["org.acme.sales.base", "org.acme.sales.extra"]
        assert "  <modules>\n      <module>org.acme.sales.base</module>\n" in content
        assert content == POM_WITH_ONE_MODULE.replace(
            "  </modules>",
            "      <module>org.acme.sales.extra</module>\n  </modules>",
        )

    def test_adding_same_module_twice_is_a_no_op(self, tmp_path: Path) -> None:
        pom = _write_pom(tmp_path / "root", POM_WITH_ONE_MODULE)
        add_module(tmp_path / "root", "org.acme.sales.extra")
        after_first = pom.read_text(encoding="utf-8")

        assert not add_module(tmp_path / "root", "org.acme.sales.extra")

        assert pom.read_text(encoding="utf-8") == after_first
        assert len(detect_modules(tmp_path / "root")) == 2

    def test_creates_modules_section(self, tmp_path: Path) -> None:
        _write_pom(tmp_path / "root", POM_WITHOUT_MODULES)
        assert add_module(tmp_path / "root", "org.acme.sales.base")
        assert detect_modules(tmp_path / "root") == ["org.acme.sales.base"]

    def test_missing_pom_is_reported(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert not add_module(tmp_path, "org.acme.sales.extra")
        assert "pom.xml not found" in capsys.readouterr().out


class TestCategory:
    """Bundles and features published through the p2 category."""

    def test_new_category_document(self) -> None:
        doc = new_category_document("org-acme-sales", "Sales", ["org.acme.sales.base"], ["org.acme.sales.feature"])
        assert doc.has_element("site/bundle", id="org.acme.sales.base")
        assert doc.has_element("site/iu", id="org.acme.sales.feature.group")
        assert doc.first_attribute("site/category-def", "label") == "Sales"

    def test_category_name_for(self) -> None:
        assert category_name_for("org.acme.sales") == "org-acme-sales"

    def test_add_bundle_is_idempotent(self, make_project: Callable[..., Path]) -> None:
        root = make_project()
        category_file = find_category_file(root)
        assert category_file is not None

        assert add_bundle_to_category(root, "org.acme.sales.extra")
        after_first = category_file.read_text(encoding="utf-8")
        assert not add_bundle_to_category(root, "org.acme.sales.extra")

        assert category_file.read_text(encoding="utf-8") == after_first
        doc = XmlDocument.load(category_file)
        assert doc.has_element("site/bundle", id="org.acme.sales.extra")
        assert doc.first_attribute("site/bundle/category", "name") == "org-acme-sales"
        assert after_first.count("<category-def") == 1

    def test_bundle_goes_before_category_definition(self, make_project: Callable[..., Path]) -> None:
        root = make_project()
        add_bundle_to_category(root, "org.acme.sales.extra")
        category_file = find_category_file(root)
        assert category_file is not None
        content = category_file.read_text(encoding="utf-8")
        assert content.index('id="org.acme.sales.extra"') < content.index("<category-def")

    def test_add_feature_group(self, make_project: Callable[..., Path]) -> None:
        root = make_project()
        assert add_feature_to_category(root, "org.acme.sales.feature")
        assert not add_feature_to_category(root, "org.acme.sales.feature")
        category_file = find_category_file(root)
        assert category_file is not None
        assert XmlDocument.load(category_file).has_element("site/iu", id="org.acme.sales.feature.group")

    def test_no_p2_module(self, tmp_path: Path) -> None:
        assert not add_bundle_to_category(tmp_path, "org.acme.sales.extra")


class TestFeature:
    """Plugins and fragments listed in ``feature.xml``."""

    def test_new_feature_document_omits_empty_vendor(self) -> None:
        doc = new_feature_document("org.acme.sales.feature", "Sales", "1.0.0.qualifier", "", [("org.acme.sales.base", False)])
        assert doc.first_attribute("feature", "provider-name") is None
        assert doc.has_element("feature/plugin", id="org.acme.sales.base", unpack="false")

    def test_add_plugin_and_fragment(self, make_project: Callable[..., Path]) -> None:
        root = make_project(with_feature=True)
        feature_file = root / "org.acme.sales.feature" / "feature.xml"

        assert add_plugin_to_feature(root, "org.acme.sales.extra")
        assert add_plugin_to_feature(root, "org.acme.sales.fragment", fragment=True)
        assert not add_plugin_to_feature(root, "org.acme.sales.extra")

        doc = XmlDocument.load(feature_file)
        assert doc.has_element("feature/plugin", id="org.acme.sales.base")
        assert doc.has_element("feature/plugin", id="org.acme.sales.extra")
        assert doc.has_element("feature/plugin", id="org.acme.sales.fragment", fragment="true")

    def test_project_without_feature(self, make_project: Callable[..., Path]) -> None:
        root = make_project()
        assert not add_plugin_to_feature(root, "org.acme.sales.extra")

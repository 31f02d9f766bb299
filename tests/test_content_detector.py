"""Tests for content-signature detection of shared infrastructure."""

from __future__ import annotations

from pathlib import Path

from idempiere_cli.core.content_detector import (
    ACTIVATOR,
    CALLOUT_FACTORY,
    EVENT_MANAGER,
    ContentDetector,
    has_shared_component,
)


def _java(src_dir: Path, name: str, body: str) -> Path:
    src_dir.mkdir(parents=True, exist_ok=True)
    path = src_dir / name
    path.write_text(body, encoding="utf-8")
    return path


class TestHasSharedComponent:
    """Detection reads contents of first-level ``.java`` files only."""

    def test_custom_named_factory_is_found(self, tmp_path: Path) -> None:
        _java(tmp_path, "MyFactory.java", "public class MyFactory extends AnnotationBasedColumnCalloutFactory {}")
        assert has_shared_component(tmp_path, ["AnnotationBasedColumnCalloutFactory"])

    def test_nested_files_are_ignored(self, tmp_path: Path) -> None:
        _java(tmp_path / "internal", "MyFactory.java", "extends AnnotationBasedColumnCalloutFactory")
        assert not has_shared_component(tmp_path, ["AnnotationBasedColumnCalloutFactory"])

    def test_non_java_files_are_ignored(self, tmp_path: Path) -> None:
        _java(tmp_path, "notes.txt", "AnnotationBasedColumnCalloutFactory")
        assert not has_shared_component(tmp_path, ["AnnotationBasedColumnCalloutFactory"])

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert not has_shared_component(tmp_path / "absent", ["anything"])


class TestContentDetector:
    """Capability queries per infrastructure kind."""

    def test_callout_class_is_not_a_factory(self, tmp_path: Path) -> None:
        _java(tmp_path, "OrderCallout.java", "public class OrderCallout implements IColumnCallout {}")
        assert not ContentDetector(tmp_path).has_infrastructure(CALLOUT_FACTORY)

    def test_hand_written_factory_interface(self, tmp_path: Path) -> None:
        _java(tmp_path, "Factory.java", "public class Factory implements IColumnCalloutFactory {}")
        assert ContentDetector(tmp_path).has_infrastructure(CALLOUT_FACTORY)

    def test_event_manager_signature(self, tmp_path: Path) -> None:
        detector = ContentDetector(tmp_path)
        assert not detector.has_infrastructure(EVENT_MANAGER)
        _java(tmp_path, "Events.java", "public class Events extends AnnotationBasedEventManager {}")
        assert detector.has_infrastructure(EVENT_MANAGER)

    def test_legacy_event_handler_is_not_a_manager(self, tmp_path: Path) -> None:
        """Old-style handlers do not dispatch annotated delegates."""
        _java(tmp_path, "LegacyHandler.java", "public class LegacyHandler extends AbstractEventHandler {}")
        detector = ContentDetector(tmp_path)
        assert not detector.has_infrastructure(EVENT_MANAGER)
        assert detector.find_infrastructure_file(EVENT_MANAGER) is None

    def test_activator_signature(self, tmp_path: Path) -> None:
        _java(tmp_path, "Boot.java", "public class Boot extends Incremental2PackActivator {}")
        assert ContentDetector(tmp_path).has_infrastructure(ACTIVATOR)

    def test_find_infrastructure_file_returns_first_match_by_name(self, tmp_path: Path) -> None:
        _java(tmp_path, "AOrderCallout.java", "implements IColumnCallout")
        second = _java(tmp_path, "BFactory.java", "extends AnnotationBasedColumnCalloutFactory")
        _java(tmp_path, "CFactory.java", "extends AnnotationBasedColumnCalloutFactory")
        assert ContentDetector(tmp_path).find_infrastructure_file(CALLOUT_FACTORY) == second

    def test_find_infrastructure_file_none(self, tmp_path: Path) -> None:
        assert ContentDetector(tmp_path).find_infrastructure_file(ACTIVATOR) is None

"""Scaffolding engine: the entry point for creating and extending plugin projects.

The engine resolves a component kind to its generator, builds the
generation context and sequences file generation, manifest merging and
structural registration. Every public operation returns a
``ScaffoldResult`` instead of raising; failures are reported as one
diagnostic line naming the failed check and, where there is one, the path.

Usage:
    >>> engine = ScaffoldEngine()
    >>> result = engine.add_component("callout", "OrderCallout", Path("org.acme.sales.base"))
    >>> result.exit_code
    <ExitCodes.SUCCESS: 0>
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from idempiere_cli.core import component_kinds as kinds
from idempiere_cli.core import module_writer
from idempiere_cli.core.manifest_merger import add_required_headers
from idempiere_cli.core.plugin_descriptor import (
    DEFAULT_FRAGMENT_HOST,
    DEFAULT_VERSION,
    PluginDescriptor,
    validate_plugin_id,
)
from idempiere_cli.core.project_detector import (
    BASE_SUFFIX,
    FRAGMENT_SUFFIX,
    MANIFEST_PATH,
    PARENT_SUFFIX,
    POM_FILE,
    detect_platform_version,
    detect_plugin_id,
    detect_plugin_vendor,
    detect_plugin_version,
    detect_project_base_id,
    find_multi_module_root,
    find_plugin_dir,
    has_feature,
    has_fragment,
    has_test,
)
from idempiere_cli.core.scaffold_result import ErrorCode, ScaffoldError, ScaffoldResult
from idempiere_cli.core.structural_mutator import (
    add_bundle_to_category,
    add_feature_to_category,
    add_module,
    add_plugin_to_feature,
)
from idempiere_cli.core.template_data import build_template_data, module_data, module_names
from idempiere_cli.core.template_renderer import TemplateRenderer
from idempiere_cli.generators import get_generator
from idempiere_cli.generators.base import HAS_EVENT_HANDLER, HAS_PROCESS_MAPPED, GeneratedFiles
from idempiere_cli.helpers.helpers_logging import (
    print_error,
    print_header,
    print_info,
    print_success,
)
from idempiere_cli.helpers.naming import is_valid_class_name

# Context keys owned by the engine; a content source cannot replace them
_RESERVED_KEYS = ("pluginId", "className")


class ContentSource(Protocol):
    """Pluggable provider of extra generation context (e.g. an AI assistant).

    ``enrich`` receives the kind and the context built so far and returns
    additional keys. It must not rely on being called: the engine runs
    without any content source by default.
    """

    def enrich(self, kind: str, context: Mapping[str, object]) -> dict[str, object]:
        ...


def _failure(code: str, message: str) -> ScaffoldResult:
    print_error(message)
    return ScaffoldResult.error(code, message)


def _failure_from(exc: ScaffoldError) -> ScaffoldResult:
    result = ScaffoldResult.from_exception(exc)
    print_error(result.error_message or "Scaffolding failed")
    return result


def _io_failure(action: str, exc: OSError) -> ScaffoldResult:
    location = f" ({exc.filename})" if exc.filename else ""
    return _failure(ErrorCode.IO_ERROR, f"{action}: {exc.strerror or exc}{location}")


class ScaffoldEngine:
    """Create plugin projects and add components or modules to existing ones."""

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        content_source: ContentSource | None = None,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.content_source = content_source

    # ------------------------------------------------------------------
    # New projects
    # ------------------------------------------------------------------

    def create_plugin(self, descriptor: PluginDescriptor) -> ScaffoldResult:
        """Scaffold a new project for ``descriptor`` under its root directory."""
        error = validate_plugin_id(descriptor.plugin_id)
        if error is not None:
            return _failure(ErrorCode.INVALID_ARGUMENT, error)

        unknown = sorted(descriptor.features - set(kinds.COMPONENT_KINDS) - {kinds.TEST_FEATURE})
        if unknown:
            return _failure(
                ErrorCode.UNKNOWN_COMPONENT_TYPE,
                f"Unknown component type(s): {', '.join(unknown)}",
            )

        root = descriptor.root_dir
        if root.exists():
            return _failure(ErrorCode.DIRECTORY_EXISTS, f"Directory '{root}' already exists")

        try:
            root.mkdir(parents=True)
            if descriptor.multi_module:
                self._create_multi_module(descriptor, root)
            else:
                self._create_standalone(descriptor, root)
        except ScaffoldError as exc:
            return _failure_from(exc)
        except OSError as exc:
            return _io_failure("Error creating project", exc)
        return ScaffoldResult.ok(root)

    def _create_multi_module(self, descriptor: PluginDescriptor, root: Path) -> None:
        plugin_id = descriptor.plugin_id
        print_header(f"Creating iDempiere multi-module project: {plugin_id}")
        data = build_template_data(descriptor)

        self.renderer.render_to_file("multi-module/root-pom.xml.j2", data, root / POM_FILE)
        parent_dir = root / f"{plugin_id}{PARENT_SUFFIX}"
        parent_dir.mkdir(parents=True, exist_ok=True)
        self.renderer.render_to_file("multi-module/parent-pom.xml.j2", data, parent_dir / POM_FILE)

        base_id = descriptor.base_plugin_id
        base_dir = root / base_id
        module_writer.create_plugin_module(self.renderer, base_dir, base_id, data)
        self._generate_components(descriptor, base_dir, base_id)

        if descriptor.with_test:
            module_writer.create_test_module(self.renderer, root / f"{base_id}.test", data)

        fragment_id = str(data["fragmentId"])
        if descriptor.with_fragment:
            module_writer.create_fragment_module(self.renderer, root / fragment_id, data)

        feature_id = str(data["featureId"])
        if descriptor.with_feature:
            plugins = [(base_id, False)]
            if descriptor.with_fragment:
                plugins.append((fragment_id, True))
            module_writer.create_feature_module(self.renderer, root / feature_id, data, plugins)

        bundles = [base_id]
        if descriptor.with_fragment:
            bundles.append(fragment_id)
        features = [feature_id] if descriptor.with_feature else []
        module_writer.create_p2_module(self.renderer, root / f"{plugin_id}.p2", data, bundles, features)
        module_writer.write_project_files(self.renderer, root)

        print_success("Multi-module project created successfully!")
        print_info("Structure:")
        print_info(f"  {plugin_id}/")
        for module in module_names(descriptor):
            print_info(f"    {module}/")

    def _create_standalone(self, descriptor: PluginDescriptor, root: Path) -> None:
        print_header(f"Creating iDempiere plugin: {descriptor.plugin_id}")
        data = build_template_data(descriptor)
        module_writer.create_standalone_files(self.renderer, root, data)
        self._generate_components(descriptor, root, descriptor.plugin_id)
        print_success("Plugin created successfully!")

    def _generate_components(self, descriptor: PluginDescriptor, plugin_dir: Path, plugin_id: str) -> GeneratedFiles:
        """Run the generators of every requested kind, then one manifest merge pass.

        Sibling-feature flags are fixed before the first generator runs so a
        later generator can skip infrastructure an earlier one creates.
        """
        selected = [kind for kind in kinds.COMPONENT_KINDS if descriptor.has_feature(kind)]
        if (
            not descriptor.multi_module
            and descriptor.has_feature(kinds.TEST_FEATURE)
            and kinds.BASE_TEST not in selected
        ):
            selected.append(kinds.BASE_TEST)

        context: dict[str, object] = {
            "pluginId": plugin_id,
            HAS_EVENT_HANDLER: descriptor.has_feature(kinds.EVENT_HANDLER),
            HAS_PROCESS_MAPPED: descriptor.has_feature(kinds.PROCESS_MAPPED),
        }
        src_dir = module_writer.source_dir(plugin_dir, plugin_id)
        generated = GeneratedFiles()
        for kind in selected:
            generator = get_generator(kind, self.renderer)
            if generator is None:
                continue
            generated.extend(generator.generate(src_dir, plugin_dir, context))

        for kind in selected:
            add_required_headers(plugin_dir, kind, generated.service_components)
        return generated

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def add_component(
        self,
        kind: str,
        name: str,
        plugin_dir: Path,
        extra: Mapping[str, object] | None = None,
    ) -> ScaffoldResult:
        """Add one component of ``kind`` named ``name`` to an existing plugin.

        ``plugin_dir`` may be the plugin itself or any directory of a
        multi-module project, in which case its ``*.base`` plugin is used.
        """
        generator = get_generator(kind, self.renderer)
        if generator is None:
            available = ", ".join(kinds.COMPONENT_KINDS)
            return _failure(
                ErrorCode.UNKNOWN_COMPONENT_TYPE,
                f"Unknown component type: {kind}. Available: {available}",
            )
        if not is_valid_class_name(name):
            return _failure(
                ErrorCode.INVALID_ARGUMENT,
                f"Invalid class name '{name}': must be a Java identifier starting with an uppercase letter",
            )

        target = find_plugin_dir(plugin_dir)
        if target is None:
            return _failure(
                ErrorCode.NOT_A_PLUGIN,
                f"Not an iDempiere plugin: no {MANIFEST_PATH.as_posix()} found ({plugin_dir})",
            )
        plugin_id = detect_plugin_id(target) or target.resolve().name

        context: dict[str, object] = dict(extra or {})
        context.update(pluginId=plugin_id, className=name)
        if self.content_source is not None:
            enriched = self.content_source.enrich(kind, dict(context))
            context.update({key: value for key, value in enriched.items() if key not in _RESERVED_KEYS})

        print_header(f"Adding {kind}: {name}")
        try:
            generated = generator.add_to_existing(module_writer.source_dir(target, plugin_id), target, context)
        except ScaffoldError as exc:
            return _failure_from(exc)
        except OSError as exc:
            return _io_failure(f"Error adding {kind}", exc)

        print_success("Component added successfully!")
        return ScaffoldResult.ok(generated.created[0] if generated.created else target)

    # ------------------------------------------------------------------
    # Modules
    # ------------------------------------------------------------------

    def _locate_root(self, start: Path) -> Path | ScaffoldResult:
        root = find_multi_module_root(start)
        if root is None:
            return _failure(
                ErrorCode.NO_MULTI_MODULE_ROOT,
                f"No multi-module project found at or above {start} (no pom.xml with <modules>)",
            )
        return root

    @staticmethod
    def _check_collision(module_dir: Path) -> ScaffoldResult | None:
        if module_dir.exists():
            return _failure(
                ErrorCode.DIRECTORY_EXISTS,
                f"Module '{module_dir.name}' already exists in {module_dir.parent}",
            )
        return None

    @staticmethod
    def project_descriptor(root: Path) -> PluginDescriptor:
        """Rebuild the descriptor of an existing multi-module project from disk."""
        base_id = detect_project_base_id(root)
        base_dir = root / f"{base_id}{BASE_SUFFIX}"
        return PluginDescriptor(
            plugin_id=base_id,
            version=detect_plugin_version(base_dir) or DEFAULT_VERSION,
            vendor=detect_plugin_vendor(base_dir) or "",
            platform=detect_platform_version(root),
            multi_module=True,
            with_fragment=has_fragment(root),
            with_feature=has_feature(root),
            with_test=has_test(root),
            output_dir=root.parent,
        )

    def add_plugin_module(self, root: Path, plugin_id: str) -> ScaffoldResult:
        """Add another plugin module to a multi-module project."""
        error = validate_plugin_id(plugin_id)
        if error is not None:
            return _failure(ErrorCode.INVALID_ARGUMENT, error)
        located = self._locate_root(root)
        if isinstance(located, ScaffoldResult):
            return located
        module_dir = located / plugin_id
        collision = self._check_collision(module_dir)
        if collision is not None:
            return collision

        print_header(f"Adding plugin module: {plugin_id}")
        try:
            data = build_template_data(self.project_descriptor(located))
            module_writer.create_plugin_module(
                self.renderer,
                module_dir,
                plugin_id,
                data,
                project_name=module_writer.module_display_name(plugin_id),
            )
            add_module(located, plugin_id)
            add_bundle_to_category(located, plugin_id)
            add_plugin_to_feature(located, plugin_id)
        except ScaffoldError as exc:
            return _failure_from(exc)
        except OSError as exc:
            return _io_failure("Error adding plugin module", exc)

        print_success("Plugin module added successfully!")
        return ScaffoldResult.ok(module_dir)

    def add_fragment_module(self, root: Path, host: str | None = None) -> ScaffoldResult:
        """Add the ``*.fragment`` module, hosted by ``host`` (the ZK UI bundle by default)."""
        fragment_host = host or DEFAULT_FRAGMENT_HOST
        error = validate_plugin_id(fragment_host)
        if error is not None:
            return _failure(ErrorCode.INVALID_ARGUMENT, f"Invalid fragment host: {error}")
        located = self._locate_root(root)
        if isinstance(located, ScaffoldResult):
            return located
        descriptor = self.project_descriptor(located)
        fragment_id = f"{descriptor.plugin_id}{FRAGMENT_SUFFIX}"
        module_dir = located / fragment_id
        collision = self._check_collision(module_dir)
        if collision is not None:
            return collision

        print_header(f"Adding fragment module: {fragment_id}")
        print_info(f"Fragment host: {fragment_host}")
        try:
            data = module_data(build_template_data(descriptor), fragmentHost=fragment_host)
            module_writer.create_fragment_module(self.renderer, module_dir, data)
            add_module(located, fragment_id)
            add_bundle_to_category(located, fragment_id)
            add_plugin_to_feature(located, fragment_id, fragment=True)
        except ScaffoldError as exc:
            return _failure_from(exc)
        except OSError as exc:
            return _io_failure("Error adding fragment module", exc)

        print_success("Fragment module added successfully!")
        return ScaffoldResult.ok(module_dir)

    def add_feature_module(self, root: Path) -> ScaffoldResult:
        """Add the ``*.feature`` module grouping the project's plugin and fragment."""
        located = self._locate_root(root)
        if isinstance(located, ScaffoldResult):
            return located
        descriptor = self.project_descriptor(located)
        data = build_template_data(descriptor)
        feature_id = str(data["featureId"])
        module_dir = located / feature_id
        collision = self._check_collision(module_dir)
        if collision is not None:
            return collision

        plugins: list[tuple[str, bool]] = []
        if (located / descriptor.base_plugin_id).is_dir():
            plugins.append((descriptor.base_plugin_id, False))
        fragment_id = str(data["fragmentId"])
        if (located / fragment_id).is_dir():
            plugins.append((fragment_id, True))

        print_header(f"Adding feature module: {feature_id}")
        try:
            module_writer.create_feature_module(self.renderer, module_dir, data, plugins)
            add_module(located, feature_id)
            add_feature_to_category(located, feature_id)
        except ScaffoldError as exc:
            return _failure_from(exc)
        except OSError as exc:
            return _io_failure("Error adding feature module", exc)

        print_success("Feature module added successfully!")
        return ScaffoldResult.ok(module_dir)

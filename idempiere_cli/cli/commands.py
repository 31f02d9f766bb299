#!/usr/bin/env python3
"""
iDempiere CLI - command entry point.

Usage:
    idempiere-cli init org.acme.sales --with-callout --with-process
    idempiere-cli add callout --name OrderCallout --to org.acme.sales/org.acme.sales.base
    idempiere-cli add plugin-module --name org.acme.sales.extra --to org.acme.sales
    idempiere-cli info --dir org.acme.sales
    idempiere-cli validate org.acme.sales --strict
    idempiere-cli migrate --to 13 --dir org.acme.sales
    idempiere-cli config set defaults.vendor "ACME Corp"

Every command exits with 0 (success), 1 (invalid input), 2 (I/O error) or
3 (project state does not allow the operation).
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from idempiere_cli.core import component_kinds as kinds
from idempiere_cli.core.cli_config import (
    KNOWN_KEYS,
    ConfigError,
    load_config,
    set_global_value,
)
from idempiere_cli.core.platform_migrator import migrate
from idempiere_cli.core.platform_version import PlatformVersion, UnsupportedVersionError, supported_majors
from idempiere_cli.core.plugin_descriptor import DEFAULT_FRAGMENT_HOST, DEFAULT_VERSION, PluginDescriptor
from idempiere_cli.core.plugin_validator import Severity, ValidationIssue, validate_plugin
from idempiere_cli.core.project_detector import (
    detect_modules,
    detect_platform_version,
    detect_plugin_id,
    detect_plugin_version,
    find_multi_module_root,
    find_plugin_dir,
    is_idempiere_plugin,
)
from idempiere_cli.core.scaffold_engine import ScaffoldEngine
from idempiere_cli.core.scaffold_result import ExitCodes, ScaffoldError, ScaffoldResult
from idempiere_cli.helpers.helpers_logging import (
    print_error,
    print_header,
    print_info,
    print_success,
    print_warning,
)

KIND_HELP: dict[str, str] = {
    kinds.CALLOUT: "Add an annotated column callout (shares one callout factory)",
    kinds.EVENT_HANDLER: "Add a model event delegate (shares one event manager)",
    kinds.PROCESS: "Add a server process with its own process factory",
    kinds.PROCESS_MAPPED: "Add an annotated process mapped by the 2Pack activator",
    kinds.ZK_FORM: "Add a programmatic ZK form with a form factory",
    kinds.ZK_FORM_ZUL: "Add a ZUL-backed form with its controller",
    kinds.LISTBOX_GROUP: "Add a form with a grouped listbox",
    kinds.WLISTBOX_EDITOR: "Add a form with an editable WListbox grid",
    kinds.REPORT: "Add a print-format report process",
    kinds.JASPER_REPORT: "Add a Jasper report (shares the 2Pack activator)",
    kinds.WINDOW_VALIDATOR: "Add a window validator",
    kinds.REST_EXTENSION: "Add a REST API resource extension",
    kinds.FACTS_VALIDATOR: "Add an accounting facts validator (shares one event manager)",
    kinds.BASE_TEST: "Add a JUnit test based on AbstractTestCase",
}


def _flag_param(kind: str) -> str:
    """``--with-event-handler`` -> ``with_event_handler``."""
    return "with_" + kind.replace("-", "_")


def _finish(ctx: click.Context, result: ScaffoldResult) -> int:
    """Turn an engine result into the command's exit code."""
    code = int(result.exit_code)
    if code != ExitCodes.SUCCESS:
        ctx.exit(code)
    return code


def _fail(ctx: click.Context, message: str, code: ExitCodes = ExitCodes.VALIDATION_ERROR) -> int:
    print_error(message)
    ctx.exit(int(code))
    return int(code)


@click.group(invoke_without_command=True)
@click.version_option(package_name="idempiere-cli", prog_name="idempiere-cli")
@click.pass_context
def cli(ctx: click.Context) -> int:
    """Scaffold and extend iDempiere OSGi plugin projects."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
    return 0


# ----------------------------------------------------------------------------
# init
# ----------------------------------------------------------------------------


def _component_options(func: Callable[..., Any]) -> Callable[..., Any]:
    for kind in reversed(kinds.COMPONENT_KINDS):
        func = click.option(
            f"--with-{kind}",
            _flag_param(kind),
            is_flag=True,
            help=f"Generate a {kind} component",
        )(func)
    return func


@cli.command("init")
@click.argument("plugin_id")
@click.option("--standalone", is_flag=True, help="Single plugin instead of a multi-module project")
@click.option("--with-fragment", "with_fragment_module", is_flag=True, help="Add a fragment module")
@click.option("--with-feature", "with_feature_module", is_flag=True, help="Add a feature module")
@click.option("--no-test", is_flag=True, help="Skip the test module")
@click.option("--with-test", is_flag=True, help="Standalone only: add a base test class")
@click.option("--fragment-host", default=DEFAULT_FRAGMENT_HOST, show_default=True, help="Fragment host bundle")
@click.option("--version", "plugin_version", default=DEFAULT_VERSION, show_default=True, help="Bundle version")
@click.option("--vendor", default=None, help="Bundle vendor (defaults to config)")
@click.option(
    "--idempiere-version",
    type=int,
    default=None,
    help=f"Target iDempiere major version ({', '.join(str(m) for m in supported_majors())})",
)
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--output-dir", type=click.Path(file_okay=False, path_type=Path), default=None)
@_component_options
@click.pass_context
def init_cmd(
    ctx: click.Context,
    plugin_id: str,
    standalone: bool,
    with_fragment_module: bool,
    with_feature_module: bool,
    no_test: bool,
    with_test: bool,
    fragment_host: str,
    plugin_version: str,
    vendor: str | None,
    idempiere_version: int | None,
    config_path: Path | None,
    output_dir: Path | None,
    **component_flags: bool,
) -> int:
    """Create a new plugin project PLUGIN_ID (e.g. org.acme.sales)."""
    config = load_config(explicit=config_path)
    major = idempiere_version if idempiere_version is not None else config.idempiere_version
    try:
        platform = PlatformVersion.of(major)
    except UnsupportedVersionError as exc:
        return _fail(ctx, str(exc))

    features = {kind for kind in kinds.COMPONENT_KINDS if component_flags.get(_flag_param(kind))}
    if standalone and with_test:
        features.add(kinds.TEST_FEATURE)

    descriptor = PluginDescriptor(
        plugin_id=plugin_id,
        version=plugin_version,
        vendor=vendor if vendor is not None else config.vendor,
        platform=platform,
        features=features,
        multi_module=not standalone,
        with_fragment=with_fragment_module and not standalone,
        with_feature=with_feature_module and not standalone,
        with_test=not no_test and not standalone,
        fragment_host=fragment_host,
        output_dir=output_dir,
    )
    result = ScaffoldEngine().create_plugin(descriptor)
    if result.success:
        print_info("Next steps:")
        print_info(f"  1. cd {descriptor.root_dir}")
        print_info("  2. Import in Eclipse: File > Import > Maven > Existing Maven Projects")
        print_info("  3. Build with: mvn verify")
    return _finish(ctx, result)


# ----------------------------------------------------------------------------
# add
# ----------------------------------------------------------------------------


@cli.group("add")
def add_group() -> None:
    """Add a component or module to an existing project."""


def _register_component_command(kind: str) -> None:
    def _command(
        ctx: click.Context,
        name: str | None,
        target: Path,
        prompt: str | None,
        resource_path: str | None = None,
    ) -> int:
        if not name:
            return _fail(ctx, "Missing option '--name'")
        extra: dict[str, object] = {}
        if prompt:
            extra["prompt"] = prompt
        if resource_path:
            extra["resourcePath"] = resource_path
        return _finish(ctx, ScaffoldEngine().add_component(kind, name, target, extra))

    command: Callable[..., Any] = _command
    if kind == kinds.REST_EXTENSION:
        command = click.option("--resource-path", default=None, help="URL path segment (default: lowercased name)")(command)
    command = click.option("--prompt", default=None, help="Behaviour description passed to content sources")(command)
    command = click.option(
        "--to", "target", type=click.Path(path_type=Path), default=Path("."), show_default=True,
        help="Plugin directory (or any directory of a multi-module project)",
    )(command)
    command = click.option("--name", default=None, help="Class name")(command)
    command = click.pass_context(command)
    add_group.add_command(click.command(name=kind, help=KIND_HELP[kind])(command))


for _kind in kinds.COMPONENT_KINDS:
    _register_component_command(_kind)


_ROOT_OPTION = click.option(
    "--to", "target", type=click.Path(path_type=Path), default=Path("."), show_default=True,
    help="Any directory inside the multi-module project",
)


@add_group.command("plugin-module")
@click.option("--name", default=None, help="Bundle id of the new plugin module")
@_ROOT_OPTION
@click.pass_context
def add_plugin_module_cmd(ctx: click.Context, name: str | None, target: Path) -> int:
    """Add a plugin module to a multi-module project."""
    if not name:
        return _fail(ctx, "Missing option '--name'")
    return _finish(ctx, ScaffoldEngine().add_plugin_module(target, name))


@add_group.command("fragment-module")
@click.option("--host", default=None, help=f"Fragment host bundle (default: {DEFAULT_FRAGMENT_HOST})")
@_ROOT_OPTION
@click.pass_context
def add_fragment_module_cmd(ctx: click.Context, host: str | None, target: Path) -> int:
    """Add the fragment module to a multi-module project."""
    return _finish(ctx, ScaffoldEngine().add_fragment_module(target, host))


@add_group.command("feature-module")
@_ROOT_OPTION
@click.pass_context
def add_feature_module_cmd(ctx: click.Context, target: Path) -> int:
    """Add the feature module to a multi-module project."""
    return _finish(ctx, ScaffoldEngine().add_feature_module(target))


# ----------------------------------------------------------------------------
# info
# ----------------------------------------------------------------------------


@cli.command("info")
@click.option("--dir", "directory", type=click.Path(path_type=Path), default=Path("."), show_default=True)
@click.pass_context
def info_cmd(ctx: click.Context, directory: Path) -> int:
    """Show what the CLI detects about a plugin or project."""
    plugin_dir = find_plugin_dir(directory)
    root = find_multi_module_root(directory)
    if plugin_dir is None and root is None:
        return _fail(ctx, f"Not an iDempiere plugin or project: {directory}", ExitCodes.STATE_ERROR)

    print_header("iDempiere plugin info")
    if plugin_dir is not None:
        print_info(f"  Plugin id:       {detect_plugin_id(plugin_dir)}")
        print_info(f"  Version:         {detect_plugin_version(plugin_dir) or 'unknown'}")
        print_info(f"  Plugin dir:      {plugin_dir}")
    if root is not None:
        print_info(f"  Multi-module:    {root}")
        for module in detect_modules(root):
            print_info(f"    - {module}")
        print_info(f"  iDempiere:       {detect_platform_version(root)}")
    else:
        print_info("  Multi-module:    no")
    return int(ExitCodes.SUCCESS)


# ----------------------------------------------------------------------------
# validate
# ----------------------------------------------------------------------------


def _print_issue(issue: ValidationIssue) -> None:
    if issue.severity is Severity.ERROR:
        print_error(f"  {issue}")
    elif issue.severity is Severity.WARNING:
        print_warning(f"  {issue}")
    else:
        print_info(f"  {issue}")


@cli.command("validate")
@click.argument("plugin_dir", type=click.Path(path_type=Path), default=Path("."))
@click.option("--strict", is_flag=True, help="Treat warnings as errors")
@click.option("-q", "--quiet", is_flag=True, help="Only print errors")
@click.option("--json", "json_output", is_flag=True, help="Print the report as JSON")
@click.pass_context
def validate_cmd(ctx: click.Context, plugin_dir: Path, strict: bool, quiet: bool, json_output: bool) -> int:
    """Check a plugin's manifest, build files, descriptors and sources.

    PLUGIN_DIR may also be a multi-module project; its base plugin is checked.
    """
    if not plugin_dir.is_dir():
        return _fail(ctx, f"Not a directory: {plugin_dir}", ExitCodes.STATE_ERROR)
    result = validate_plugin(find_plugin_dir(plugin_dir) or plugin_dir)
    failed = result.error_count > 0 or (strict and result.warning_count > 0)

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        if not quiet:
            print_header("iDempiere plugin validation")
            print_info(f"  Plugin: {result.plugin_id}")
            print_info(f"  Path:   {result.plugin_dir}")
        for issue in result.issues:
            if quiet and issue.severity is not Severity.ERROR:
                continue
            _print_issue(issue)
        if not quiet:
            print_info(f"Errors: {result.error_count}, Warnings: {result.warning_count}")
            if result.error_count:
                print_error("Validation FAILED")
            elif failed:
                print_error("Validation FAILED (strict mode: warnings count as errors)")
            else:
                suffix = " (with warnings)" if result.warning_count else ""
                print_success(f"Validation PASSED{suffix}")

    if failed:
        ctx.exit(int(ExitCodes.VALIDATION_ERROR))
    return int(ExitCodes.SUCCESS)


# ----------------------------------------------------------------------------
# migrate
# ----------------------------------------------------------------------------


@cli.command("migrate")
@click.option("--from", "from_major", type=int, default=None, help="Current iDempiere major version (default: detected)")
@click.option("--to", "to_major", type=int, required=True, help="Target iDempiere major version")
@click.option("--dir", "directory", type=click.Path(path_type=Path), default=Path("."), show_default=True)
@click.pass_context
def migrate_cmd(ctx: click.Context, from_major: int | None, to_major: int, directory: Path) -> int:
    """Retarget a plugin or multi-module project to another iDempiere version."""
    root = find_multi_module_root(directory)
    if root is None and not is_idempiere_plugin(directory):
        return _fail(ctx, f"Not an iDempiere plugin or project: {directory}", ExitCodes.STATE_ERROR)
    base_dir = root if root is not None else directory

    try:
        target = PlatformVersion.of(to_major)
        source = PlatformVersion.of(from_major) if from_major is not None else detect_platform_version(base_dir)
    except UnsupportedVersionError as exc:
        return _fail(ctx, str(exc))

    print_header(f"Migrating {base_dir} from iDempiere {source} to {target}")
    try:
        result = migrate(base_dir, source, target)
    except ScaffoldError as exc:
        return _fail(ctx, exc.message, ExitCodes.IO_ERROR)

    if not result.changes:
        print_info("  No changes needed.")
        return int(ExitCodes.SUCCESS)
    for change in result.changes:
        print_success(change)
    print_info(f"Updated {len(result.changed_files)} file(s)")
    return int(ExitCodes.SUCCESS)


# ----------------------------------------------------------------------------
# config
# ----------------------------------------------------------------------------


@cli.group("config")
def config_group() -> None:
    """Show or change CLI defaults."""


@config_group.command("show")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
def config_show_cmd(config_path: Path | None) -> int:
    """Print the effective configuration and where it comes from."""
    config = load_config(explicit=config_path)
    for key, value in config.as_dict().items():
        click.echo(f"{key} = {value}")
    if config.sources:
        click.echo("Sources:")
        for source in config.sources:
            click.echo(f"  {source}")
    else:
        click.echo("Sources: (built-in defaults)")
    return int(ExitCodes.SUCCESS)


@config_group.command("get")
@click.argument("key")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_context
def config_get_cmd(ctx: click.Context, key: str, config_path: Path | None) -> int:
    """Print one configuration value."""
    try:
        value = load_config(explicit=config_path).get(key)
    except ConfigError as exc:
        return _fail(ctx, str(exc))
    click.echo(value)
    return int(ExitCodes.SUCCESS)


@config_group.command("set")
@click.argument("key", type=click.Choice(KNOWN_KEYS))
@click.argument("value")
@click.pass_context
def config_set_cmd(ctx: click.Context, key: str, value: str) -> int:
    """Write KEY to the global config file."""
    try:
        path = set_global_value(key, value)
    except ConfigError as exc:
        return _fail(ctx, str(exc))
    print_success(f"Set {key} = {value} in {path}")
    return int(ExitCodes.SUCCESS)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    try:
        result = cli.main(
            args=sys.argv[1:] if argv is None else argv,
            prog_name="idempiere-cli",
            standalone_mode=False,
        )
    except click.Abort:
        print("\n⚠️  Cancelled by user")
        return 130
    except click.UsageError as exc:
        exc.show()
        return int(ExitCodes.VALIDATION_ERROR)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    return 0 if result is None else int(result)


__all__ = ["cli", "main"]


if __name__ == "__main__":
    sys.exit(main())

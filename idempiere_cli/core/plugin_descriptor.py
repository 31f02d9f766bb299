"""In-memory description of a plugin project to scaffold."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from idempiere_cli.core.platform_version import PlatformVersion
from idempiere_cli.helpers.naming import JAVA_RESERVED_WORDS, extract_plugin_name

DEFAULT_VERSION = "1.0.0.qualifier"
DEFAULT_FRAGMENT_HOST = "org.adempiere.ui.zk"

_SEGMENT = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
_QUALIFIER = ".qualifier"
_MIN_ID_SEGMENTS = 2


def validate_plugin_id(plugin_id: str) -> str | None:
    """Return an error message if ``plugin_id`` is not a valid bundle id, else None."""
    if not plugin_id:
        return "Plugin id must not be empty"
    segments = plugin_id.split(".")
    if len(segments) < _MIN_ID_SEGMENTS:
        return f"Plugin id '{plugin_id}' must have at least two dot-separated segments (e.g. org.example.myplugin)"
    for segment in segments:
        if not _SEGMENT.match(segment):
            return f"Invalid segment '{segment}' in plugin id '{plugin_id}'"
        if segment in JAVA_RESERVED_WORDS:
            return f"Segment '{segment}' in plugin id '{plugin_id}' is a Java reserved word"
    return None


@dataclass
class PluginDescriptor:
    """Identity, platform target, feature set and module topology of a plugin.

    Never persisted: for existing projects the equivalent facts are read
    back from the manifest and poms by ``project_detector``.
    """

    plugin_id: str
    version: str = DEFAULT_VERSION
    vendor: str = ""
    platform: PlatformVersion = field(default_factory=PlatformVersion.latest)
    features: set[str] = field(default_factory=set)
    multi_module: bool = True
    with_fragment: bool = False
    with_feature: bool = False
    with_test: bool = True
    fragment_host: str = DEFAULT_FRAGMENT_HOST
    project_name: str | None = None
    output_dir: Path | None = None

    @property
    def plugin_name(self) -> str:
        return extract_plugin_name(self.plugin_id)

    @property
    def display_name(self) -> str:
        return self.project_name or self.plugin_name

    @property
    def group_id(self) -> str:
        return ".".join(self.plugin_id.split(".")[:2])

    @property
    def base_plugin_id(self) -> str:
        return f"{self.plugin_id}.base"

    @property
    def package_path(self) -> str:
        return self.plugin_id.replace(".", "/")

    @property
    def base_version(self) -> str:
        """Version without the OSGi ``.qualifier`` suffix."""
        return self.version.removesuffix(_QUALIFIER)

    @property
    def maven_version(self) -> str:
        """Version in Maven form (``.qualifier`` -> ``-SNAPSHOT``)."""
        if self.version.endswith(_QUALIFIER):
            return self.base_version + "-SNAPSHOT"
        return self.version

    @property
    def root_dir(self) -> Path:
        """Directory the project is created in."""
        base = self.output_dir if self.output_dir is not None else Path.cwd()
        return base / self.plugin_id

    def has_feature(self, kind: str) -> bool:
        return kind in self.features

    def add_feature(self, kind: str) -> None:
        self.features.add(kind)

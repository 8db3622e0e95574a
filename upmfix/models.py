"""Core data models for upmfix."""

import difflib
from dataclasses import dataclass, field
from pathlib import Path

from .lines import split_lines
from .versions import parse_release_version, split_prerelease

MSBUILD_REGISTRY_URL = (
    "https://pkgs.dev.azure.com/UnityDeveloperTools/MSBuildForUnity"
    "/_packaging/UnityDeveloperTools/npm/registry"
)
MSBUILD_REGISTRY_NAME = "MS Build for Unity"
MSBUILD_REGISTRY_SCOPES = ("com.microsoft",)
MSBUILD_PACKAGE_NAME = "com.microsoft.msbuildforunity"
MSBUILD_PACKAGE_VERSION = "0.9.1"


class ManifestFormatError(Exception):
    """The manifest does not have the layout the patcher can safely edit."""


@dataclass
class ScopedRegistry:
    """A scoped registry record, per the manifest file format."""

    name: str
    url: str
    scopes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"name": self.name, "url": self.url, "scopes": list(self.scopes)}


@dataclass
class DependencyEntry:
    """A single line in the manifest's dependencies block."""

    name: str
    version: str


@dataclass(frozen=True)
class PatchConfig:
    """The package and registry a project manifest must reference."""

    package_name: str = MSBUILD_PACKAGE_NAME
    package_version: str = MSBUILD_PACKAGE_VERSION
    registry_name: str = MSBUILD_REGISTRY_NAME
    registry_url: str = MSBUILD_REGISTRY_URL
    registry_scopes: tuple[str, ...] = MSBUILD_REGISTRY_SCOPES

    def __post_init__(self):
        object.__setattr__(self, "registry_scopes", tuple(self.registry_scopes))
        if not self.package_name:
            raise ValueError("package_name must not be empty")
        if not self.registry_url:
            raise ValueError("registry_url must not be empty")
        release, _ = split_prerelease(self.package_version)
        if parse_release_version(release) is None:
            raise ValueError(f"Invalid package version: {self.package_version!r}")

    @property
    def dependency(self) -> DependencyEntry:
        return DependencyEntry(name=self.package_name, version=self.package_version)


DEFAULT_CONFIG = PatchConfig()


@dataclass
class ManifestLayout:
    """Line indices found while scanning a manifest (None when absent)."""

    dependencies_start: int | None = None
    dependencies_end: int | None = None
    registries_start: int | None = None
    registries_end: int | None = None
    dependency_line: int | None = None

    def in_registries_block(self, index: int) -> bool:
        if self.registries_start is None or self.registries_end is None:
            return False
        return self.registries_start <= index <= self.registries_end


@dataclass
class PatchResult:
    """Outcome of ensuring a dependency and registry in one manifest."""

    path: Path
    original: str
    updated: str
    registry_added: bool = False
    dependency_added: bool = False
    written: bool = False

    @property
    def changed(self) -> bool:
        return self.original != self.updated

    @property
    def diff(self) -> str:
        return "".join(
            difflib.unified_diff(
                split_lines(self.original, keepends=True),
                split_lines(self.updated, keepends=True),
                fromfile=str(self.path),
                tofile=str(self.path),
            )
        )

"""Ensure a project manifest references a package and its scoped registry."""

import json
import logging
from pathlib import Path

from .lines import line_ending, split_lines
from .locate import locate_manifest
from .models import DEFAULT_CONFIG, ManifestFormatError, PatchConfig, PatchResult
from .registries import ensure_registry, load_registries, render_registries_block
from .splice import scan_layout, splice_manifest
from .versions import is_version_satisfied

logger = logging.getLogger(__name__)

BOM = "\ufeff"


def read_manifest(manifest_path: Path) -> str:
    """Read manifest text, keeping its line endings and any byte order mark."""
    with manifest_path.open(encoding="utf-8", newline="") as handle:
        return handle.read()


def write_manifest(manifest_path: Path, content: str) -> None:
    """Truncate the manifest and write the full replacement content."""
    with manifest_path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(content)


def check_dependency_satisfied(
    project_root: str | Path,
    package_name: str = DEFAULT_CONFIG.package_name,
    min_version: str = DEFAULT_CONFIG.package_version,
) -> bool:
    """Report whether the project manifest has package_name at min_version or later.

    Never raises for a missing, empty or unreadable manifest; those are False.
    """
    manifest_path = locate_manifest(project_root)
    if manifest_path is None:
        return False

    try:
        content = read_manifest(manifest_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to read the package manifest file (%s): %s", manifest_path, e)
        return False

    if not content.strip():
        return False

    return is_version_satisfied(content, package_name, min_version)


def apply_patch(manifest_text: str, config: PatchConfig = DEFAULT_CONFIG) -> tuple[str, bool, bool]:
    """Apply the dependency and registry edits to manifest text.

    Args:
        manifest_text: The manifest file content
        config: Package and registry to ensure

    Returns:
        Tuple of (updated content, registry added, dependency added)

    Raises:
        ManifestFormatError: If the manifest cannot be edited safely
    """
    bom = BOM if manifest_text.startswith(BOM) else ""
    text = manifest_text[len(bom):]

    registries = load_registries(text)
    registries, registry_added = ensure_registry(
        registries, config.registry_name, config.registry_url, config.registry_scopes
    )

    lines = split_lines(text, keepends=True)
    # New lines follow the first line's ending; kept lines keep their own.
    newline = (line_ending(lines[0]) if lines else "") or "\n"
    if lines and not line_ending(lines[-1]):
        lines[-1] += newline

    layout = scan_layout(lines, config.package_name)
    spliced = splice_manifest(
        lines, layout, render_registries_block(registries), config.dependency, newline=newline
    )
    updated = "".join(spliced)

    try:
        json.loads(updated)
    except json.JSONDecodeError as e:
        raise ManifestFormatError(f"Patched manifest would not be valid JSON: {e}") from e

    return bom + updated, registry_added, layout.dependency_line is None


def ensure_dependency_and_registry(
    project_root: str | Path,
    config: PatchConfig = DEFAULT_CONFIG,
    dry_run: bool = False,
) -> PatchResult | None:
    """Add or update the configured dependency and scoped registry in place.

    Args:
        project_root: The project directory containing Packages/manifest.json
        config: Package and registry to ensure
        dry_run: Compute the result without writing the file

    Returns:
        The patch result, or None if the manifest is missing or malformed
    """
    manifest_path = locate_manifest(project_root)
    if manifest_path is None:
        return None

    try:
        original = read_manifest(manifest_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to read the package manifest file (%s): %s", manifest_path, e)
        return None

    try:
        updated, registry_added, dependency_added = apply_patch(original, config)
    except ManifestFormatError as e:
        logger.error("Failed to update the package manifest file (%s): %s", manifest_path, e)
        return None

    result = PatchResult(
        path=manifest_path,
        original=original,
        updated=updated,
        registry_added=registry_added,
        dependency_added=dependency_added,
    )

    if not result.changed:
        logger.debug("Package manifest (%s) is already up to date", manifest_path)
        return result

    if dry_run:
        logger.debug("Dry run, not writing %s", manifest_path)
        return result

    write_manifest(manifest_path, updated)
    result.written = True
    logger.info(
        "Updated %s: %s %s%s",
        manifest_path,
        config.package_name,
        config.package_version,
        " (added scoped registry)" if registry_added else "",
    )
    return result

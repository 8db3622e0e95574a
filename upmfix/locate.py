"""Package manifest discovery."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

MANIFEST_RELATIVE_PATH = Path("Packages") / "manifest.json"


def locate_manifest(project_root: str | Path) -> Path | None:
    """Find the package manager manifest beneath a project root.

    Args:
        project_root: The project directory (the parent of Assets/)

    Returns:
        Absolute path to Packages/manifest.json, or None if it does not exist
    """
    manifest_path = (Path(project_root) / MANIFEST_RELATIVE_PATH).resolve()

    if not manifest_path.is_file():
        logger.error("Package manifest file (%s) could not be found.", manifest_path)
        return None

    return manifest_path

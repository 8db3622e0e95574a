"""Minimum-version checks for manifest dependency lines.

Versions are dotted numeric strings of two to four components ("0.9",
"0.9.1", "1.2.3.4"). Anything after the first "-" is a pre-release
qualifier: it is dropped before comparing, and a pre-release only
satisfies a minimum it is strictly greater than, so "0.9.1-preview.3"
does not count as "0.9.1".
"""

import logging
import re

from packaging.version import InvalidVersion, Version

from .lines import split_lines

logger = logging.getLogger(__name__)

_RELEASE_PATTERN = re.compile(r"^\d+(\.\d+){1,3}$")


def split_prerelease(version_string: str) -> tuple[str, bool]:
    """Return the release part of a version and whether a qualifier was cut."""
    if "-" in version_string:
        return version_string[: version_string.index("-")], True
    return version_string, False


def parse_release_version(version_string: str) -> Version | None:
    """Parse a dotted numeric version, returning None when it is malformed."""
    candidate = version_string.strip()
    if not _RELEASE_PATTERN.match(candidate):
        return None

    try:
        return Version(candidate)
    except InvalidVersion:
        return None


def extract_version_string(line: str) -> str | None:
    """Pull the version out of a `"name": "version",` line."""
    parts = line.split(":")
    if len(parts) != 2:
        return None
    return parts[1].strip(' ",')


def is_version_satisfied(manifest_text: str, package_name: str, min_version: str) -> bool:
    """Check whether the manifest references package_name at min_version or later.

    Args:
        manifest_text: The manifest file content
        package_name: Package to look for (matched as a substring of a line)
        min_version: Minimum acceptable release version

    Returns:
        True if the first line mentioning the package carries a new enough
        version, otherwise False. Malformed versions never raise.
    """
    minimum = parse_release_version(min_version)
    if minimum is None:
        logger.error("Invalid minimum version %r for %s", min_version, package_name)
        return False

    for line in split_lines(manifest_text):
        if package_name not in line:
            continue

        version_string = extract_version_string(line)
        if version_string is None:
            logger.debug("Unexpected formatting for %s: %r", package_name, line)
            return False

        version_string, prerelease = split_prerelease(version_string)
        version = parse_release_version(version_string)
        if version is None:
            logger.debug("Unparseable version for %s: %r", package_name, version_string)
            return False

        # Pre-release builds should be upgraded to the final release.
        if prerelease:
            return version > minimum
        return version >= minimum

    return False

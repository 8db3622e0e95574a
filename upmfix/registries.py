"""Scoped registry decoding, deduplication and serialization."""

import json

from .models import ManifestFormatError, ScopedRegistry

INDENT = 4


def load_registries(manifest_text: str) -> list[ScopedRegistry]:
    """Decode only the scopedRegistries array of a manifest.

    Args:
        manifest_text: The manifest file content

    Returns:
        Registries in document order (empty when the field is absent)

    Raises:
        ManifestFormatError: If the document is not JSON or the field is malformed
    """
    try:
        document = json.loads(manifest_text)
    except json.JSONDecodeError as e:
        raise ManifestFormatError(f"Manifest is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise ManifestFormatError("Manifest root must be a JSON object")

    raw_registries = document.get("scopedRegistries")
    if raw_registries is None:
        return []
    if not isinstance(raw_registries, list):
        raise ManifestFormatError("scopedRegistries must be an array")

    registries = []
    for raw in raw_registries:
        if not isinstance(raw, dict):
            raise ManifestFormatError("scopedRegistries entries must be objects")

        name, url, scopes = raw.get("name"), raw.get("url"), raw.get("scopes")
        if not isinstance(name, str) or not isinstance(url, str):
            raise ManifestFormatError("scopedRegistries entries need string name and url")
        if not isinstance(scopes, list) or not all(isinstance(scope, str) for scope in scopes):
            raise ManifestFormatError(f"scopes of registry {url!r} must be an array of strings")

        registries.append(ScopedRegistry(name=name, url=url, scopes=list(scopes)))

    return registries


def ensure_registry(
    registries: list[ScopedRegistry], name: str, url: str, scopes: list[str]
) -> tuple[list[ScopedRegistry], bool]:
    """Make sure a registry with the given url is present.

    An existing record with the same url wins as-is; its name and scopes are
    not merged or updated. The input list is left untouched.

    Returns:
        The resulting registries and whether a record was appended
    """
    if any(registry.url == url for registry in registries):
        return list(registries), False

    return [*registries, ScopedRegistry(name=name, url=url, scopes=list(scopes))], True


def render_registries_block(registries: list[ScopedRegistry]) -> list[str]:
    """Serialize registries as the lines of a `"scopedRegistries": [...],` member."""
    serialized = json.dumps(
        {"scopedRegistries": [registry.to_dict() for registry in registries]},
        indent=INDENT,
        ensure_ascii=False,
    )

    # Drop the wrapping "{" and "}" lines, then close the member with a comma.
    lines = serialized.splitlines()[1:-1]
    lines[-1] = lines[-1].rstrip() + ","
    return lines

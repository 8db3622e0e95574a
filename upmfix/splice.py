"""Line-oriented splicing of manifest edits.

Everything except the dependency line and the scopedRegistries member is
treated as opaque text and written back unchanged, in order. All positions
are indices into the original lines, so inserting the dependency line never
shifts the registries range. Lines may carry their own terminators; kept
lines are written back with theirs.
"""

import re

from .lines import line_ending
from .models import DependencyEntry, ManifestFormatError, ManifestLayout

DEPENDENCY_INDENT = "    "

_DEPENDENCIES_OPEN = re.compile(r'"dependencies"\s*:\s*\{')
_REGISTRIES_OPEN = re.compile(r'"scopedRegistries"\s*:')
_STRING = re.compile(r'"(?:[^"\\]|\\.)*"')


def _closes_object(line: str) -> bool:
    return "}" in _STRING.sub('""', line)


def scan_layout(lines: list[str], package_name: str) -> ManifestLayout:
    """Record where the dependencies, registries and package lines are.

    The dependency line is the first line inside the dependencies object
    that contains package_name; mentions elsewhere in the file are ignored.
    """
    layout = ManifestLayout()

    for i, line in enumerate(lines):
        if layout.registries_start is None and _REGISTRIES_OPEN.search(line):
            layout.registries_start = i
        if (
            layout.registries_start is not None
            and layout.registries_end is None
            and "]," in line
        ):
            layout.registries_end = i

        if layout.dependencies_start is None:
            if _DEPENDENCIES_OPEN.search(line):
                layout.dependencies_start = i
                if package_name in line:
                    layout.dependency_line = i
            continue

        if layout.dependencies_end is not None:
            continue

        if package_name in line and layout.dependency_line is None:
            layout.dependency_line = i
        if _closes_object(line):
            layout.dependencies_end = i

    return layout


def validate_layout(lines: list[str], layout: ManifestLayout) -> None:
    """Reject layouts that would make splicing write to the wrong place.

    Raises:
        ManifestFormatError: If an insertion point cannot be determined safely
    """
    if layout.dependencies_start is None:
        raise ManifestFormatError('No "dependencies": { line found in manifest')

    opening = lines[layout.dependencies_start]
    remainder = opening[_DEPENDENCIES_OPEN.search(opening).end():]
    if "}" in remainder:
        raise ManifestFormatError("dependencies must not be opened and closed on one line")

    if layout.dependencies_start == 0:
        raise ManifestFormatError("dependencies must not open on the first line")

    if layout.dependencies_end is None:
        raise ManifestFormatError("dependencies object is not closed")

    if layout.registries_start is not None and layout.registries_end is None:
        raise ManifestFormatError('scopedRegistries is not closed by a "]," line')

    if layout.in_registries_block(layout.dependencies_start):
        raise ManifestFormatError("dependencies found inside scopedRegistries")

    if layout.dependency_line == layout.dependencies_start:
        raise ManifestFormatError("package entry shares a line with the dependencies opening")

    if layout.dependency_line == layout.dependencies_end:
        raise ManifestFormatError("package entry shares a line with the dependencies closing")


def render_dependency_line(entry: DependencyEntry, template: str | None = None, last: bool = False) -> str:
    """Format a dependency entry as a manifest line.

    When replacing an existing line, its indentation, trailing comma and line
    ending are kept.
    """
    if template is None:
        indent = DEPENDENCY_INDENT
        comma = "" if last else ","
        ending = ""
    else:
        indent = template[: len(template) - len(template.lstrip())]
        comma = "," if template.rstrip().endswith(",") else ""
        ending = line_ending(template)

    return f'{indent}"{entry.name}": "{entry.version}"{comma}{ending}'


def splice_manifest(
    lines: list[str],
    layout: ManifestLayout,
    registry_block: list[str],
    entry: DependencyEntry,
    newline: str = "",
) -> list[str]:
    """Assemble the patched manifest lines.

    Args:
        lines: Original manifest lines
        layout: Result of scan_layout() over the same lines
        registry_block: Lines from render_registries_block()
        entry: Dependency to insert or overwrite
        newline: Terminator for lines that are not copied from the original

    Returns:
        The full replacement content as lines

    Raises:
        ManifestFormatError: If the layout has no safe insertion point
    """
    validate_layout(lines, layout)

    if layout.dependency_line is not None:
        dependency_line = render_dependency_line(entry, template=lines[layout.dependency_line])
    else:
        body = lines[layout.dependencies_start + 1 : layout.dependencies_end]
        empty_block = not any(line.strip() for line in body) and (
            lines[layout.dependencies_end].strip().startswith("}")
        )
        dependency_line = render_dependency_line(entry, last=empty_block) + newline

    spliced: list[str] = []
    registries_written = False

    for i, line in enumerate(lines):
        if layout.in_registries_block(i):
            continue

        # The registries member goes in front of the first kept line after the opening one.
        if not registries_written and i > 0:
            spliced.extend(block_line + newline for block_line in registry_block)
            registries_written = True

        if i == layout.dependency_line:
            spliced.append(dependency_line)
            continue

        spliced.append(line)

        if layout.dependency_line is None and i == layout.dependencies_start:
            spliced.append(dependency_line)

    return spliced

"""Line splitting for manifest text.

Only "\\n" and "\\r\\n" end a line. str.splitlines() also breaks on U+2028,
U+2029, U+0085 and other characters JSON allows inside string values.
"""

import re

_LINE_END = re.compile(r"(?<=\n)")


def strip_line_ending(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


def line_ending(line: str) -> str:
    return line[len(strip_line_ending(line)):]


def split_lines(text: str, keepends: bool = False) -> list[str]:
    """Split text into lines, optionally keeping each line's own terminator."""
    lines = _LINE_END.split(text)
    if lines and lines[-1] == "":
        lines.pop()

    if keepends:
        return lines
    return [strip_line_ending(line) for line in lines]

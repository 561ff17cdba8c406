# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Classification of raw configuration lines.

A configuration line is one of:

- a comment (first character is ``;``)
- blank (empty or whitespace only)
- settable: ``<setting_path><whitespace><setting_value>``

Settable lines are split at the first whitespace run. The value is the
rest of the line taken verbatim, so internal and trailing whitespace
survive unchanged.

Example:
    ```python
    from cfgfs.parsing.lines import classify_line

    classify_line("video.driver opengl")
    # Setting(path='video.driver', value='opengl')

    classify_line("; a comment")
    # None
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from cfgfs.exceptions import MalformedLineError

__all__ = ["COMMENT_PREFIX", "Setting", "classify_line", "strip_line_ending"]

COMMENT_PREFIX = ";"

_SETTABLE_RE = re.compile(r"(\S*)\s+(.*)", re.DOTALL)


@dataclass(frozen=True)
class Setting:
    """One settable line split into its dotted path and raw value."""

    path: str
    value: str


def strip_line_ending(raw: str) -> str:
    """Removes a trailing ``\\n`` or ``\\r\\n`` from a line read from a file."""
    if raw.endswith("\n"):
        raw = raw[:-1]
    if raw.endswith("\r"):
        raw = raw[:-1]
    return raw


def is_comment(line: str) -> bool:
    return line[:1] == COMMENT_PREFIX


def is_blank(line: str) -> bool:
    return not line.strip()


def classify_line(line: str, line_number: int | None = None) -> Setting | None:
    """Classifies one configuration line.

    Args:
        line: The raw line with no trailing newline.
        line_number: 1-based position in the source, used in error messages.

    Returns:
        A Setting for settable lines, or None for comments and blank lines.

    Note:
        A line that starts with whitespace yields an empty setting path,
        which resolves to the root settings file with an empty key.

    Raises:
        MalformedLineError: If the line has no whitespace separator.
    """
    if is_comment(line):
        return None
    if is_blank(line):
        return None

    match = _SETTABLE_RE.match(line)
    if match is None:
        raise MalformedLineError(
            f"no whitespace between setting and value: {line!r}",
            line=line,
            line_number=line_number,
        )

    return Setting(path=match.group(1), value=match.group(2))

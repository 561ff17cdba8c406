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

"""Resolution of dotted setting paths into virtual filesystem paths.

A setting path such as ``input.port1.type`` is split at its last dot into
a section path (``input.port1``) and a leaf key (``type``). The section
path maps onto an absolute directory-style path (``/input/port1``) whose
prefixes are the levels the tree builder walks, shortest first.

Setting paths without any dot are top-level settings and resolve to no
levels at all; they belong to the root settings file.
"""

from __future__ import annotations

from dataclasses import dataclass

from cfgfs.exceptions import MalformedLineError

__all__ = [
    "SECTION_SEPARATOR",
    "PATH_SEPARATOR",
    "ResolvedPath",
    "resolve_setting_path",
    "section_to_path",
    "path_levels",
    "split_level",
]

SECTION_SEPARATOR = "."
PATH_SEPARATOR = "/"


@dataclass(frozen=True)
class ResolvedPath:
    """A setting path broken into the pieces the tree builder needs.

    Attributes:
        leaf_key: The setting name written into the rc-file.
        levels: Absolute paths from the shortest prefix to the full section
            path. Empty for top-level settings.
    """

    leaf_key: str
    levels: tuple[str, ...]

    @property
    def is_top_level(self) -> bool:
        return not self.levels


def section_to_path(section_path: str) -> str:
    """Converts ``a.b.c`` into ``/a/b/c``."""
    return PATH_SEPARATOR + section_path.replace(SECTION_SEPARATOR, PATH_SEPARATOR)


def path_levels(dir_path: str) -> list[str]:
    """Returns every prefix level of an absolute path, root-to-leaf.

    Example:
        ```python
        path_levels("/a/b/c")
        # ['/a', '/a/b', '/a/b/c']
        ```
    """
    segments = dir_path.strip(PATH_SEPARATOR).split(PATH_SEPARATOR)
    return [
        PATH_SEPARATOR + PATH_SEPARATOR.join(segments[: i + 1])
        for i in range(len(segments))
    ]


def split_level(level: str) -> tuple[str, str]:
    """Splits a level into its parent path and base name.

    The parent of a first-level path is the root, ``/``.
    """
    parent, _, base_name = level.rpartition(PATH_SEPARATOR)
    return parent or PATH_SEPARATOR, base_name


def resolve_setting_path(
    setting_path: str, line_number: int | None = None
) -> ResolvedPath:
    """Resolves a dotted setting path into a leaf key and its levels.

    Args:
        setting_path: The path part of a settable line.
        line_number: 1-based source position, used in error messages.

    Returns:
        The resolved path. ``levels`` is empty for top-level settings.

    Raises:
        MalformedLineError: If the section path contains an empty segment
            (``a..b.key`` or ``.key``). The builder decides whether that
            skips the setting or aborts construction.
    """
    section_path, separator, leaf_key = setting_path.rpartition(SECTION_SEPARATOR)
    if not separator:
        return ResolvedPath(leaf_key=setting_path, levels=())

    if any(not segment for segment in section_path.split(SECTION_SEPARATOR)):
        raise MalformedLineError(
            f"empty section name in setting path: {setting_path!r}",
            line=setting_path,
            line_number=line_number,
        )

    return ResolvedPath(
        leaf_key=leaf_key,
        levels=tuple(path_levels(section_to_path(section_path))),
    )

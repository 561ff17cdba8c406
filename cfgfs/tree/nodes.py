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

"""Node types for the virtual configuration tree.

A node is either a Directory or a File. Directories own their children in
creation order, directories and files kept in separate lists. Files own an
ordered list of SettingLine records; their content is always rendered on
demand from those records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

__all__ = ["SettingLine", "File", "Directory", "Node", "node_kind"]


@dataclass(frozen=True)
class SettingLine:
    """One ``key value`` pair as it appears inside an rc-file."""

    key: str
    value: str

    @property
    def rendered(self) -> str:
        return f"{self.key} {self.value}\n"


@dataclass(eq=False)
class File:
    """A synthesized file aggregating the settings of one section."""

    name: str
    lines: list[SettingLine] = field(default_factory=list)

    def append(self, key: str, value: str) -> SettingLine:
        line = SettingLine(key=key, value=value)
        self.lines.append(line)
        return line

    def render(self) -> str:
        """Concatenates every rendered line, in insertion order."""
        return "".join(line.rendered for line in self.lines)

    def content(self, encoding: str = "utf-8") -> bytes:
        return self.render().encode(encoding)


@dataclass(eq=False)
class Directory:
    """A section level that has deeper sections below it."""

    name: str
    directories: list[Directory] = field(default_factory=list)
    files: list[File] = field(default_factory=list)

    def child_names(self) -> list[str]:
        """Directory names first, then file names, each in creation order."""
        return [d.name for d in self.directories] + [f.name for f in self.files]


Node = Union[Directory, File]


def node_kind(node: Node) -> str:
    """Returns ``"directory"`` or ``"file"`` for a node."""
    if isinstance(node, Directory):
        return "directory"
    if isinstance(node, File):
        return "file"
    raise TypeError(f"not a tree node: {node!r}")
